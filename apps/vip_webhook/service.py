# vip_webhook/service.py
"""
orders/paid pipeline:
  1) verify X-Shopify-Hmac-Sha256 against the raw body   (401 on failure)
  2) parse the order JSON                                 (400 on failure)
  3) filter: paid, has customer, has a VIP line           (200 "Ignored: ...")
  4) read customer tags -> add VIP tag -> write back      (500 on any Shopify failure)

Shopify redelivers on non-2xx, so only step 4 failures are worth a retry.
The tag merge is idempotent, which is what makes duplicate or concurrent
deliveries for the same customer harmless.
"""
from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple

import requests

from .adapters.shopify_client import CustomerStore, ShopifyError
from .config import Settings
from .rules import order_has_vip_line
from .tags import add_tag
from .verify import verify_shopify_hmac

logger = logging.getLogger(__name__)


class MalformedPayload(ValueError):
    pass


def customer_id_or_none(value) -> Optional[int]:
    """Positive int or all-digit string -> int; anything else (bool, dict, "1/2") -> None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        n = int(value.strip())
        return n if n > 0 else None
    return None


@dataclass(frozen=True)
class WebhookRequest:
    raw_body:    bytes
    signature:   str = ""
    topic:       str = ""
    shop_domain: str = ""
    webhook_id:  str = ""


@dataclass(frozen=True)
class LineItem:
    variant_id: Any = None
    product_id: Any = None
    sku:        Optional[str] = None

    @classmethod
    def from_payload(cls, li: dict) -> "LineItem":
        return cls(li.get("variant_id"), li.get("product_id"), li.get("sku"))


@dataclass(frozen=True)
class Order:
    id:               Any
    financial_status: Optional[str]
    customer_id:      Any
    line_items:       Tuple[LineItem, ...] = ()

    @classmethod
    def from_payload(cls, data: Any) -> "Order":
        if not isinstance(data, dict):
            raise MalformedPayload(f"order payload must be an object, got {type(data).__name__}")
        customer = data.get("customer")
        customer_id = customer_id_or_none(customer.get("id")) if isinstance(customer, dict) else None
        lines = data.get("line_items")
        if not isinstance(lines, list):
            lines = []
        return cls(
            id=data.get("id"),
            financial_status=data.get("financial_status"),
            customer_id=customer_id,
            line_items=tuple(LineItem.from_payload(li) for li in lines if isinstance(li, dict)),
        )

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Order":
        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError, RecursionError) as e:
            raise MalformedPayload(str(e)) from e
        return cls.from_payload(data)


@dataclass(frozen=True)
class Outcome:
    status:  int
    message: str


class OrdersPaidPipeline:
    def __init__(self, settings: Settings, store: CustomerStore):
        self.settings = settings
        self.store = store

    def handle(self, req: WebhookRequest) -> Outcome:
        logger.info(f"[vip] webhook topic={req.topic} shop={req.shop_domain} webhook_id={req.webhook_id}")

        # 1) authenticate before touching the body
        hmac_ok = verify_shopify_hmac(self.settings.webhook_secret, req.raw_body, req.signature)
        logger.info(f"[vip] HMAC valid: {hmac_ok}")
        if not hmac_ok:
            return Outcome(401, "Invalid HMAC")

        # 2) parse
        try:
            order = Order.from_bytes(req.raw_body)
        except MalformedPayload as e:
            logger.error(f"[vip] failed to parse JSON body: {e}")
            return Outcome(400, "Bad JSON")

        logger.info(f"[vip] order={order.id} financial_status={order.financial_status}")

        # 3) filter
        if order.financial_status != "paid":
            logger.info("[vip] ignored: not paid")
            return Outcome(200, "Ignored: not paid")

        if not order.customer_id:
            logger.info("[vip] ignored: no customer on order")
            return Outcome(200, "Ignored: no customer")

        rule = self.settings.vip_rule
        logger.info(
            f"[vip] line variant_ids={[li.variant_id for li in order.line_items]} "
            f"product_ids={[li.product_id for li in order.line_items]} "
            f"skus={[li.sku for li in order.line_items]} | rule {rule.describe()}"
        )
        if not order_has_vip_line(order, rule):
            logger.info("[vip] ignored: VIP product not found in line items")
            return Outcome(200, "Ignored: not VIP")

        # 4) tag
        try:
            return self.tag_customer(order.customer_id)
        except (ShopifyError, requests.RequestException) as e:
            status = getattr(e, "status_code", None)
            body = getattr(e, "body", None)
            logger.error(f"[vip] failed to update customer tags: {e} status={status} body={str(body)[:300]}")
            return Outcome(500, "Failed to tag customer")

    def tag_customer(self, customer_id) -> Outcome:
        """Read-merge-write of the VIP tag for one customer. Shopify failures propagate."""
        tag = self.settings.vip_tag
        logger.info(f"[vip] tagging customer {customer_id}")

        customer = self.store.get_customer(customer_id)
        if not isinstance(customer, dict) or not isinstance(customer.get("tags") or "", str):
            raise ShopifyError("Shopify returned no customer", None, customer)
        current = customer.get("tags") or ""
        updated = add_tag(current, tag)

        # equal only when the tag is there and the stored string has no repeats or blanks
        if updated == current:
            logger.info(f"[vip] customer {customer_id} already has {tag}: {current}")
            return Outcome(200, f"Already tagged {tag}")

        if self.settings.dry_run:
            logger.info(f"[vip] DRY_RUN customer {customer_id} would become: {updated}")
            return Outcome(200, f"Dry run: would tag {tag}")

        self.store.update_customer_tags(customer_id, updated)
        logger.info(f"[vip] success, customer {customer_id} tags now: {updated}")
        return Outcome(200, f"Tagged {tag}")
