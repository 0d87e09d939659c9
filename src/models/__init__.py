"""SQLAlchemy ORM models mapped onto the CRM's tables.

Import all models here so Base.metadata discovers them.
"""

from __future__ import annotations

from src.models.base import Base
from src.models.enums import LeadStatus, UnitStatus, normalize_unit_status
from src.models.lead import Lead
from src.models.project import FloorPlan, Project
from src.models.unit import Unit

__all__ = [
    # Base
    "Base",
    # Models
    "Project",
    "FloorPlan",
    "Unit",
    "Lead",
    # Enums
    "UnitStatus",
    "LeadStatus",
    "normalize_unit_status",
]
