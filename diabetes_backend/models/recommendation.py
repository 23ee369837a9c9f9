from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from ..db.session import Base


class Recommendation(Base):
    __tablename__ = "recommendations"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    description: Mapped[str] = mapped_column(sa.Text, nullable=False)
    # NULL means the advice applies to every tier
    risk_tier: Mapped[Optional[str]] = mapped_column(sa.String(16), nullable=True, index=True)
