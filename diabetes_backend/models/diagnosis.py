import datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..db.session import Base, UTCDateTime


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class Diagnosis(Base):
    """One classifier outcome, appended after every diagnosis request."""

    __tablename__ = "diagnoses"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, index=True)
    user_id: Mapped[Optional[str]] = mapped_column(
        sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )

    risk_tier: Mapped[str] = mapped_column(sa.String(16), nullable=False)
    score: Mapped[float] = mapped_column(sa.Float, nullable=False)
    matched_rule: Mapped[Optional[str]] = mapped_column(sa.String(32), nullable=True)
    symptom_codes: Mapped[list[str]] = mapped_column(sa.JSON, nullable=False, default=list)

    created_at: Mapped[datetime.datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=_utcnow
    )

    user = relationship("User", back_populates="diagnoses")
