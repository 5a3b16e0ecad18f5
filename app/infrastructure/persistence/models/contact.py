"""Contact ORM model (clients and suppliers, identified by SRI tax id)."""

from sqlalchemy import Boolean, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.company import Company
from app.infrastructure.persistence.models.mixins import CompanyScopedModel


class Contact(CompanyScopedModel, Base):
    """Contact (client and/or supplier)."""

    __tablename__ = "contacts"

    name: Mapped[str] = mapped_column(String, nullable=False)
    trade_name: Mapped[str | None] = mapped_column(String, nullable=True)
    # R = RUC, C = cedula, P = passport, F = final consumer
    sri_document_type_code: Mapped[str] = mapped_column(
        String(1), nullable=False, default="R", server_default="R"
    )
    sri_person_type: Mapped[str | None] = mapped_column(
        String(2), nullable=True, default="01"
    )
    tax_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    phone: Mapped[str | None] = mapped_column(String, nullable=True)
    address: Mapped[str | None] = mapped_column(String, nullable=True)
    is_client: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    is_supplier: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )

    company: Mapped[Company] = relationship(Company)
