"""EmissionPoint ORM model (cash register / point of sale inside an establishment)."""

from sqlalchemy import Boolean, ForeignKey, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.establishment import Establishment
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class EmissionPoint(CuidMixin, TimestampMixin, Base):
    """Emission point. Owned by a company through its establishment."""

    __tablename__ = "emission_points"

    establishment_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("establishments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    code: Mapped[str] = mapped_column(String(3), nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    invoice_sequence: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    proforma_sequence: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    order_sequence: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    delivery_note_sequence: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1
    )
    dispatch_sequence: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )

    establishment: Mapped[Establishment] = relationship(Establishment)
