from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.acl.models import Scope
from app.db.base import Base


class UserDeliveryAddress(Base):
    __tablename__ = "user_delivery_addresses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)

    country: Mapped[str] = mapped_column(String(100), nullable=False)
    postal_code: Mapped[str] = mapped_column(String(20), nullable=False)
    administrative_area_level_1: Mapped[str | None] = mapped_column(String(100), nullable=True)
    administrative_area_level_2: Mapped[str | None] = mapped_column(String(100), nullable=True)
    locality: Mapped[str | None] = mapped_column(String(100), nullable=True)
    political: Mapped[str | None] = mapped_column(String(100), nullable=True)
    route: Mapped[str | None] = mapped_column(String(200), nullable=True)
    street_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    address: Mapped[str | None] = mapped_column(String(300), nullable=True)

    # At most one priority address per user (maintained by the repository).
    is_priority: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def is_in_scope(self, scope: Scope, acting_user_id: int | None) -> bool:
        if scope is Scope.ALL:
            return True
        return self.user_id is not None and self.user_id == acting_user_id
