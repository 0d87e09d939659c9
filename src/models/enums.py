"""Domain enums used across SQLAlchemy models and Pydantic schemas.

All enums use str mixin for JSON serialization.
"""

from __future__ import annotations

from enum import Enum


class UnitStatus(str, Enum):
    """Sales status of a unit — only AVAILABLE units are offered to leads."""

    AVAILABLE = "available"
    ON_HOLD = "on_hold"
    CONTRACT = "contract"
    SOLD = "sold"


class LeadStatus(str, Enum):
    """Lead lifecycle status."""

    NEW = "new"
    CONTACTED = "contacted"
    QUALIFIED = "qualified"
    LOST = "lost"


# Raw status strings stored by the CRM (mixed case) → UnitStatus.
# Anything unrecognized is treated as available, as the CRM UI does.
_UNIT_STATUS_MAP: dict[str, UnitStatus] = {
    "available": UnitStatus.AVAILABLE,
    "held": UnitStatus.ON_HOLD,
    "on_hold": UnitStatus.ON_HOLD,
    "contract": UnitStatus.CONTRACT,
    "sold": UnitStatus.SOLD,
}


def normalize_unit_status(raw: str | None) -> UnitStatus:
    """Map a stored unit status string onto UnitStatus."""
    if not raw:
        return UnitStatus.AVAILABLE
    return _UNIT_STATUS_MAP.get(raw.strip().lower(), UnitStatus.AVAILABLE)
