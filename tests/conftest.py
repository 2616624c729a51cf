from __future__ import annotations

import json
from typing import Any

import pytest

from vip_webhook import create_app
from vip_webhook.adapters.shopify_client import ShopifyError
from vip_webhook.config import Settings
from vip_webhook.rules import VipRule
from vip_webhook.verify import sign_payload

SECRET = "test-webhook-secret"
VIP_VARIANT = "999"


class FakeCustomerStore:
    """In-memory stand-in for the Shopify Admin API, recording every call."""

    def __init__(self, tags: dict[Any, str] | None = None, fail_get: int | None = None,
                 fail_update: int | None = None):
        self.tags = dict(tags or {})
        self.calls: list[tuple] = []
        self.fail_get = fail_get
        self.fail_update = fail_update

    def get_customer(self, customer_id):
        self.calls.append(("GET", customer_id))
        if self.fail_get:
            raise ShopifyError(f"Shopify API error {self.fail_get}", self.fail_get, {"errors": "unavailable"})
        return {"id": customer_id, "tags": self.tags.get(customer_id, "")}

    def update_customer_tags(self, customer_id, tags):
        self.calls.append(("PUT", customer_id, tags))
        if self.fail_update:
            raise ShopifyError(f"Shopify API error {self.fail_update}", self.fail_update, {"errors": "unavailable"})
        self.tags[customer_id] = tags
        return {"id": customer_id, "tags": tags}


def make_settings(**overrides) -> Settings:
    base = dict(
        webhook_secret=SECRET,
        shopify_store="test-shop.myshopify.com",
        shopify_token="shpat_test_token",
        vip_rule=VipRule(variant_id=VIP_VARIANT),
    )
    base.update(overrides)
    return Settings(**base)


def order_payload(financial_status="paid", customer_id=42, line_items=None) -> dict:
    if line_items is None:
        line_items = [{"variant_id": 999, "product_id": 111, "sku": "VIP-PASS"}]
    order = {
        "id": 5678901234567,
        "name": "#1001",
        "financial_status": financial_status,
        "line_items": line_items,
    }
    if customer_id is not None:
        order["customer"] = {"id": customer_id, "email": "customer@example.com"}
    return order


def signed_headers(raw: bytes, secret: str = SECRET) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "X-Shopify-Hmac-Sha256": sign_payload(secret, raw),
        "X-Shopify-Topic": "orders/paid",
        "X-Shopify-Shop-Domain": "test-shop.myshopify.com",
        "X-Shopify-Webhook-Id": "b54557e4-bdd9-4b37-8a5f-bf7d70bcd043",
    }


def encode(payload: dict) -> bytes:
    return json.dumps(payload).encode("utf-8")


@pytest.fixture
def store() -> FakeCustomerStore:
    return FakeCustomerStore(tags={42: "Gold"})


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def app(settings, store):
    app = create_app(settings=settings, store=store)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
