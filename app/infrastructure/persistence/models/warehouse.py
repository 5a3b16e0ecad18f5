"""Warehouse ORM model (stock location inside an establishment)."""

from sqlalchemy import Boolean, ForeignKey, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.establishment import Establishment
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class Warehouse(CuidMixin, TimestampMixin, Base):
    """Warehouse. Owned by a company through its establishment."""

    __tablename__ = "warehouses"

    establishment_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("establishments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    address: Mapped[str | None] = mapped_column(String, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )

    establishment: Mapped[Establishment] = relationship(Establishment)
