# vip_webhook/rules.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterable, Optional


@dataclass(frozen=True)
class VipRule:
    variant_id: Optional[str] = None   # recommended
    product_id: Optional[str] = None   # optional fallback
    sku:        Optional[str] = None   # optional fallback (only if the VIP variant has a SKU)

    @property
    def is_configured(self) -> bool:
        return bool(self.variant_id or self.product_id or self.sku)

    def describe(self) -> str:
        return (f"variant_id={self.variant_id or '(not set)'} "
                f"product_id={self.product_id or '(not set)'} "
                f"sku={self.sku or '(not set)'}")


def _as_str(v: Any) -> str:
    # payload ids arrive as ints, rule ids as strings
    return "" if v is None else str(v)


def _any_match(values: Iterable[Any], wanted: str) -> bool:
    return any(_as_str(v) == wanted for v in values)


def order_has_vip_line(order, rule: VipRule) -> bool:
    """
    True when any line item matches the rule.
    Checks run in order variant_id -> product_id -> sku and are OR'd;
    a rule with nothing configured never matches.
    """
    lines = list(order.line_items or [])
    if not lines:
        return False

    if rule.variant_id and _any_match((li.variant_id for li in lines), str(rule.variant_id)):
        return True

    if rule.product_id and _any_match((li.product_id for li in lines), str(rule.product_id)):
        return True

    if rule.sku:
        want = str(rule.sku).strip()
        if want and any(_as_str(li.sku).strip() == want for li in lines):
            return True

    return False
