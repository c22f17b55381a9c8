from decimal import Decimal

from sqlalchemy import DECIMAL, TEXT, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import MonitoringApiBaseModel


class Product(MonitoringApiBaseModel):
    __tablename__ = "products"

    # id, created_at, updated_at are inherited from the base model
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(TEXT, nullable=True)
    price: Mapped[Decimal | None] = mapped_column(DECIMAL(10, 2), nullable=True)
