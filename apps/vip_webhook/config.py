# vip_webhook/config.py
from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv

from .rules import VipRule

REQUIRED = ("SHOPIFY_WEBHOOK_SECRET", "SHOPIFY_STORE", "SHOPIFY_TOKEN")


class ConfigError(RuntimeError):
    pass


def _env(name: str) -> Optional[str]:
    v = os.getenv(name)
    if v is None:
        return None
    v = v.strip()
    return v or None


@dataclass(frozen=True)
class Settings:
    webhook_secret: str = field(repr=False)
    shopify_store:  str
    shopify_token:  str = field(repr=False)
    api_version:    str = "2025-07"
    http_timeout:   float = 5.0
    vip_rule:       VipRule = VipRule()
    vip_tag:        str = "VIP"
    dry_run:        bool = False

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """
        Build settings from the process environment (and .env when present).
        Secret, store and token have no defaults; missing ones raise ConfigError.
        """
        if dotenv:
            load_dotenv()
        missing = [k for k in REQUIRED if not _env(k)]
        if missing:
            raise ConfigError(f"Missing {', '.join(missing)} in environment.")

        try:
            timeout = float(_env("SHOPIFY_HTTP_TIMEOUT") or "5")
        except ValueError:
            raise ConfigError("SHOPIFY_HTTP_TIMEOUT must be a number of seconds.")
        if timeout <= 0:
            raise ConfigError("SHOPIFY_HTTP_TIMEOUT must be positive.")

        return cls(
            webhook_secret=_env("SHOPIFY_WEBHOOK_SECRET"),
            shopify_store=_env("SHOPIFY_STORE"),
            shopify_token=_env("SHOPIFY_TOKEN"),
            api_version=_env("SHOPIFY_API_VERSION") or "2025-07",
            http_timeout=timeout,
            vip_rule=VipRule(
                variant_id=_env("VIP_VARIANT_ID"),
                product_id=_env("VIP_PRODUCT_ID"),
                sku=_env("VIP_SKU"),
            ),
            vip_tag=_env("VIP_TAG") or "VIP",
            dry_run=os.getenv("VIP_DRY_RUN") == "1",
        )
