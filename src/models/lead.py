"""Lead model — a prospective buyer with stated purchase preferences.

Budget bounds are stored as free text by the CRM; they are parsed (and
silently dropped when unparsable) when building a PreferenceSnapshot.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import ARRAY, DateTime, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin
from src.models.enums import LeadStatus
from src.schemas.matching import PreferenceSnapshot


class Lead(TimestampMixin, Base):
    """A lead tracked by an agent."""

    __tablename__ = "leads"

    # Contact
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50))

    status: Mapped[str] = mapped_column(String(50), default=LeadStatus.NEW.value, nullable=False)
    pipeline_stage: Mapped[str | None] = mapped_column(String(50))
    agent_id: Mapped[str | None] = mapped_column(String(50), index=True)

    # Preferences
    target_price_min: Mapped[str | None] = mapped_column(String(50))
    target_price_max: Mapped[str | None] = mapped_column(String(50))
    # Room and size targets are not part of the CRM's base leads table; the
    # CRM must add these four columns before this service can read leads.
    target_bedrooms: Mapped[int | None] = mapped_column(Integer)
    target_bathrooms: Mapped[Decimal | None] = mapped_column(Numeric)
    target_sqft_min: Mapped[int | None] = mapped_column(Integer)
    target_sqft_max: Mapped[int | None] = mapped_column(Integer)
    target_locations: Mapped[list[str] | None] = mapped_column(ARRAY(Text))
    time_frame_to_buy: Mapped[str | None] = mapped_column(String(50))

    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def to_preferences(self) -> PreferenceSnapshot:
        """Build the PreferenceSnapshot consumed by the match engine."""
        return PreferenceSnapshot(
            target_price_min=self.target_price_min,
            target_price_max=self.target_price_max,
            target_bedrooms=self.target_bedrooms,
            target_bathrooms=self.target_bathrooms,
            target_sqft_min=self.target_sqft_min,
            target_sqft_max=self.target_sqft_max,
            target_locations=self.target_locations,
        )

    @property
    def has_preferences(self) -> bool:
        return not self.to_preferences().is_empty

    def __repr__(self) -> str:
        return f"<Lead name={self.name} status={self.status}>"
