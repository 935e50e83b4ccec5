"""Utilities for timestamps and report rounding."""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal


def iso_now() -> str:
    """Current UTC timestamp as ISO string."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def round_half_up(value, places: int = 1) -> float:
    """Round halves away from zero (6.25 -> 6.3), unlike round()'s banker's rounding."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_pct(completed: int, total: int) -> float:
    """Percentage rounded half-up to 1 decimal, clamped at 100. 0 when total is 0."""
    if total <= 0:
        return 0
    pct = Decimal(completed) * 100 / Decimal(total)
    return min(float(pct.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)), 100.0)
