"""Project and FloorPlan models — the development a unit belongs to and its layout."""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, Numeric, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from src.models.unit import Unit


class Project(TimestampMixin, Base):
    """A named development (building); its name is the location matched against leads."""

    __tablename__ = "Projects"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str | None] = mapped_column(Text)

    # Relationships
    floor_plans: Mapped[list[FloorPlan]] = relationship("FloorPlan", back_populates="project")
    units: Mapped[list[Unit]] = relationship("Unit", back_populates="project")

    def __repr__(self) -> str:
        return f"<Project name={self.name}>"


class FloorPlan(TimestampMixin, Base):
    """A floor plan shared by many units — carries the room counts and size."""

    __tablename__ = "FloorPlans"

    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("Projects.id"), nullable=False, index=True
    )
    plan_name: Mapped[str] = mapped_column(Text, nullable=False)
    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False)
    bathrooms: Mapped[Decimal] = mapped_column(Numeric, nullable=False)
    sq_ft: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    project: Mapped[Project] = relationship("Project", back_populates="floor_plans")

    def __repr__(self) -> str:
        return f"<FloorPlan {self.plan_name} beds={self.bedrooms} baths={self.bathrooms}>"
