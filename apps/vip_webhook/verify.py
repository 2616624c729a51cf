# vip_webhook/verify.py
import base64
import hashlib
import hmac


def sign_payload(secret: str, raw_body: bytes) -> str:
    """Base64 HMAC-SHA256 of the raw body, as sent in X-Shopify-Hmac-Sha256."""
    digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_shopify_hmac(secret: str, raw_body: bytes, signature) -> bool:
    """
    Check the signature header against the exact bytes received on the wire.
    Never raises: a missing, non-ASCII or wrong-length header is just invalid.
    """
    if not secret or not isinstance(signature, str) or not signature:
        return False
    if not isinstance(raw_body, (bytes, bytearray)):
        return False
    try:
        got = signature.encode("ascii")
    except UnicodeEncodeError:
        return False

    expected = sign_payload(secret, bytes(raw_body)).encode("ascii")
    if len(got) != len(expected):
        return False
    return hmac.compare_digest(expected, got)
