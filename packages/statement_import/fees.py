"""Fee breakdown coercion and reconciliation.

Pure helpers with no I/O. ``reconcile_fees`` is the single place where the
``total`` invariant is established: ``total`` exists iff some fee is nonzero,
and then equals ``amount + sum(fees)``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic.alias_generators import to_camel

# Attribute names on ParsedTransaction, in wire order.
FEE_FIELDS: tuple[str, ...] = (
    "vat",
    "service_fee",
    "commission",
    "stamp_duty",
    "transfer_fee",
    "processing_fee",
    "other_fees",
)

_ZERO = Decimal("0")


def to_decimal(raw: Any) -> Decimal | None:
    """Coerce a JSON scalar to ``Decimal``; ``None`` when it is not numeric.

    Booleans are rejected. Thousands separators in strings are tolerated.
    """

    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, Decimal):
        d = raw
    elif isinstance(raw, int):
        d = Decimal(raw)
    elif isinstance(raw, float):
        # str() keeps the shortest repr (1000.5 -> "1000.5", not binary noise)
        d = Decimal(str(raw))
    elif isinstance(raw, str):
        s = raw.strip().replace(",", "")
        if not s:
            return None
        try:
            d = Decimal(s)
        except InvalidOperation:
            return None
    else:
        return None
    if not d.is_finite():
        return None
    return d


def coerce_fee(raw: Any) -> Decimal:
    """Return a non-negative fee amount; anything non-numeric counts as zero."""

    d = to_decimal(raw)
    if d is None:
        return _ZERO
    return abs(d)


@dataclass(frozen=True, slots=True)
class FeeReconciliation:
    """Outcome of reconciling one transaction's fees.

    ``fees`` maps every fee attribute name to its amount, or ``None`` when
    the fee is zero (absent on the wire).
    """

    fees: dict[str, Decimal | None]
    total_fees: Decimal
    total: Decimal | None


def reconcile_fees(amount: Decimal, fees: Mapping[str, Any]) -> FeeReconciliation:
    """Coerce the seven fee fields and derive ``total_fees`` and ``total``.

    ``fees`` may be keyed by attribute name (``service_fee``) or wire key
    (``serviceFee``); missing keys count as zero.
    """

    coerced: dict[str, Decimal] = {}
    for name in FEE_FIELDS:
        raw = fees.get(name)
        if raw is None:
            raw = fees.get(to_camel(name))
        coerced[name] = coerce_fee(raw)

    total_fees = sum(coerced.values(), _ZERO)
    total = amount + total_fees if total_fees > 0 else None
    return FeeReconciliation(
        fees={name: (v if v != 0 else None) for name, v in coerced.items()},
        total_fees=total_fees,
        total=total,
    )


__all__ = [
    "FEE_FIELDS",
    "FeeReconciliation",
    "coerce_fee",
    "reconcile_fees",
    "to_decimal",
]
