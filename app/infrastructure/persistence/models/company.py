"""Company ORM model. Tenant root: every other business record belongs to one."""

from datetime import date

from sqlalchemy import Boolean, Date, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class Company(CuidMixin, TimestampMixin, Base):
    """Company (tenant)."""

    __tablename__ = "companies"

    name: Mapped[str] = mapped_column(String, nullable=False)
    ruc_nit: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    address: Mapped[str | None] = mapped_column(String, nullable=True)
    phone: Mapped[str | None] = mapped_column(String, nullable=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    logo_url: Mapped[str | None] = mapped_column(String, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )
    decimal_precision: Mapped[int] = mapped_column(
        Integer, nullable=False, default=2, server_default=text("2")
    )
    prevent_negative_stock: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    subscription_start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    subscription_end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
