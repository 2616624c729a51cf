# vip_webhook/routes.py
from flask import Blueprint, current_app, request

from .service import WebhookRequest

bp = Blueprint("vip_webhook", __name__)


@bp.get("/")
def health():
    return "OK", 200


@bp.post("/webhooks/orders-paid")
def orders_paid():
    # raw bytes: the HMAC covers exactly what Shopify sent
    req = WebhookRequest(
        raw_body=request.get_data(cache=False),
        signature=request.headers.get("X-Shopify-Hmac-Sha256", ""),
        topic=request.headers.get("X-Shopify-Topic", ""),
        shop_domain=request.headers.get("X-Shopify-Shop-Domain", ""),
        webhook_id=request.headers.get("X-Shopify-Webhook-Id", ""),
    )
    outcome = current_app.config["VIP_PIPELINE"].handle(req)
    return outcome.message, outcome.status, {"Content-Type": "text/plain; charset=utf-8"}
