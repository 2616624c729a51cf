from __future__ import annotations
import logging
from typing import Optional

from flask import Flask

from .adapters.shopify_client import CustomerStore, ShopifyCustomerStore
from .cli import register_cli
from .config import Settings
from .routes import bp as vip_bp
from .service import OrdersPaidPipeline


def create_app(settings: Optional[Settings] = None, store: Optional[CustomerStore] = None) -> Flask:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    app = Flask(__name__)

    if settings is None:
        settings = Settings.from_env()
    if store is None:
        store = ShopifyCustomerStore(
            settings.shopify_store,
            settings.shopify_token,
            api_version=settings.api_version,
            timeout=settings.http_timeout,
        )

    if not settings.vip_rule.is_configured:
        app.logger.warning("No VIP_VARIANT_ID / VIP_PRODUCT_ID / VIP_SKU set, no order will be tagged")
    if settings.dry_run:
        app.logger.warning("VIP_DRY_RUN=1: customer tags will not be written")

    app.config["VIP_SETTINGS"] = settings
    app.config["VIP_PIPELINE"] = OrdersPaidPipeline(settings, store)

    app.register_blueprint(vip_bp)
    register_cli(app)
    return app
