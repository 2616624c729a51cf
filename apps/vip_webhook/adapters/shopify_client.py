"""
Shopify REST Admin client for customer tags.

Endpoints used:
    GET  /admin/api/{version}/customers/{id}.json   - current customer (tags)
    PUT  /admin/api/{version}/customers/{id}.json   - full replacement of tags

No retries here: a failure surfaces as ShopifyError and the webhook answers
500 so Shopify redelivers it later.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Protocol, Tuple, Union

import requests

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "2025-07"
DEFAULT_TIMEOUT = 5.0


class ShopifyError(Exception):
    """Shopify API error with status code and body (status_code is None on transport failure)"""
    def __init__(self, message: str, status_code: Optional[int] = None, body=None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class CustomerStore(Protocol):
    def get_customer(self, customer_id: Union[int, str]) -> Dict[str, Any]: ...

    def update_customer_tags(self, customer_id: Union[int, str], tags: str) -> Dict[str, Any]: ...


def _parse_body(text: str) -> Dict[str, Any]:
    if not text:
        return {}
    try:
        return json.loads(text)
    except ValueError:
        return {"raw": text}


def _customer(data) -> Dict[str, Any]:
    if not isinstance(data, dict):
        return {}
    customer = data.get("customer")
    return customer if isinstance(customer, dict) else {}


def _valid_customer(data) -> bool:
    # a 2xx without a real customer (maintenance page, {}, null) must not read as "no tags"
    customer = data.get("customer") if isinstance(data, dict) else None
    if not isinstance(customer, dict):
        return False
    return customer.get("tags") is None or isinstance(customer.get("tags"), str)


class ShopifyCustomerStore:
    def __init__(self, store: str, token: str, api_version: str = DEFAULT_API_VERSION,
                 timeout: float = DEFAULT_TIMEOUT):
        if not store or not token:
            raise ValueError("store and token are required")
        self.base_url = f"https://{store}/admin/api/{api_version}"
        self.timeout = timeout
        self.headers = {
            "X-Shopify-Access-Token": token,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def __repr__(self):
        return f"ShopifyCustomerStore({self.base_url!r})"

    # ------------------------------------------------------------------
    # Internal: one request, bounded timeout, session closed on every path
    # ------------------------------------------------------------------

    def _request(self, method: str, path: str, body: Optional[dict] = None) -> Tuple[int, Any]:
        url = f"{self.base_url}/{path}"
        try:
            with requests.Session() as s:
                r = s.request(method, url, headers=self.headers, json=body, timeout=self.timeout)
                data = _parse_body(r.text)
        except requests.exceptions.Timeout as e:
            raise ShopifyError(f"Shopify {method} {path} timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise ShopifyError(f"Shopify {method} {path} failed: {e.__class__.__name__}") from e

        if not r.ok:
            raise ShopifyError(f"Shopify API error {r.status_code}", r.status_code, data)
        return r.status_code, data

    def get_customer(self, customer_id):
        status, data = self._request("GET", f"customers/{customer_id}.json")
        if not _valid_customer(data):
            raise ShopifyError("Shopify returned no customer", status, data)
        return data["customer"]

    def update_customer_tags(self, customer_id, tags: str):
        payload = {"customer": {"id": customer_id, "tags": tags}}
        _, data = self._request("PUT", f"customers/{customer_id}.json", payload)
        return _customer(data)
