import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from ..db.session import Base


class Symptom(Base):
    __tablename__ = "symptoms"
    __table_args__ = (
        sa.UniqueConstraint("code", name="uq_symptoms_code"),
    )

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, index=True)
    code: Mapped[str] = mapped_column(sa.String(16), nullable=False, index=True)
    label: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    # Descriptive only; the classifier never reads it
    weight: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=1)
