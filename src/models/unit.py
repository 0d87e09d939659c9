"""Unit model — a sellable condominium unit."""

from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import ForeignKey, Integer, Numeric, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin
from src.models.enums import UnitStatus, normalize_unit_status
from src.models.project import FloorPlan, Project
from src.schemas.matching import UnitSnapshot


class Unit(TimestampMixin, Base):
    """A unit in a project, laid out per one floor plan."""

    __tablename__ = "Units"

    # Foreign keys
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("Projects.id"), nullable=False, index=True
    )
    floor_plan_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("FloorPlans.id"), nullable=False
    )

    unit_number: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric, nullable=False)
    floor: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)

    # Relationships
    project: Mapped[Project] = relationship("Project", back_populates="units", lazy="joined")
    floor_plan: Mapped[FloorPlan] = relationship("FloorPlan", lazy="joined")

    @property
    def unit_status(self) -> UnitStatus:
        return normalize_unit_status(self.status)

    def to_snapshot(self) -> UnitSnapshot:
        """Flatten the unit with its floor plan and project for the match engine."""
        plan = self.floor_plan
        return UnitSnapshot(
            id=self.id,
            project_id=self.project_id,
            unit_number=self.unit_number,
            price=self.price,
            floor=self.floor,
            status=self.unit_status.value,
            bedrooms=plan.bedrooms if plan else 0,
            bathrooms=plan.bathrooms if plan else 0,
            square_feet=plan.sq_ft if plan else 0,
            building=self.project.name if self.project else "Unknown",
        )

    def __repr__(self) -> str:
        return f"<Unit {self.unit_number} status={self.status} price={self.price}>"
