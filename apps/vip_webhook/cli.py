import pathlib

import click

from .adapters.shopify_client import ShopifyError
from .service import customer_id_or_none
from .verify import sign_payload


def register_cli(app):
    @app.cli.command("vip.sign")
    @click.argument("payload_file", type=click.Path(exists=True, dir_okay=False))
    def vip_sign(payload_file):
        """Print the X-Shopify-Hmac-Sha256 value for a payload file (for replaying webhooks locally)."""
        settings = app.config["VIP_SETTINGS"]
        raw = pathlib.Path(payload_file).read_bytes()
        click.echo(sign_payload(settings.webhook_secret, raw))

    @app.cli.command("vip.tag-customer")
    @click.argument("customer_id")
    def vip_tag_customer(customer_id):
        """Apply the VIP tag to one customer, same read-merge-write as the webhook."""
        pipeline = app.config["VIP_PIPELINE"]
        cid = customer_id_or_none(customer_id)
        if cid is None:
            raise click.BadParameter(f"not a customer id: {customer_id!r}", param_hint="CUSTOMER_ID")
        try:
            outcome = pipeline.tag_customer(cid)
        except ShopifyError as e:
            raise click.ClickException(f"{e} (status={e.status_code})")
        click.echo(f"{outcome.status} {outcome.message}")
