from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.acl.engine import AclEngine
from app.acl.guard import enforce
from app.acl.models import Action, Resource
from app.models.addresses import UserDeliveryAddress
from app.schemas.addresses import NewDeliveryAddress, UpdateDeliveryAddress

logger = logging.getLogger(__name__)

# Columns that make two addresses of the same user identical.
_IDENTITY_FIELDS = (
    "country",
    "postal_code",
    "administrative_area_level_1",
    "administrative_area_level_2",
    "locality",
    "political",
    "route",
    "street_number",
    "address",
)
_REQUIRED_FIELDS = frozenset({"country", "postal_code", "is_priority"})


class UserDeliveryAddressesRepo:
    def __init__(self, db: Session, acl: AclEngine, user_id: int | None) -> None:
        self.db = db
        self.acl = acl
        self.user_id = user_id

    def list_for_user(self, user_id: int) -> list[UserDeliveryAddress]:
        stmt = (
            select(UserDeliveryAddress)
            .where(UserDeliveryAddress.user_id == user_id)
            .order_by(UserDeliveryAddress.id.desc())
        )
        addresses = list(self.db.scalars(stmt).all())
        enforce(self.acl, Resource.USER_DELIVERY_ADDRESSES, Action.READ, self.user_id, addresses)
        return addresses

    def create(self, payload: NewDeliveryAddress) -> UserDeliveryAddress:
        """
        Insert a delivery address, or return the identical one the user
        already has.
        """

        address = UserDeliveryAddress(**payload.model_dump())
        enforce(self.acl, Resource.USER_DELIVERY_ADDRESSES, Action.CREATE, self.user_id, [address])

        existing = self._find_identical(payload)
        if existing is not None:
            return existing

        self.db.add(address)
        self.db.flush()
        if address.is_priority:
            self._clear_other_priorities(address)
        self.db.commit()
        logger.info("Delivery address created id=%s user_id=%s", address.id, address.user_id)
        return address

    def update(self, address_id: int, payload: UpdateDeliveryAddress) -> UserDeliveryAddress | None:
        address = self.db.get(UserDeliveryAddress, address_id)
        if address is None:
            return None
        enforce(self.acl, Resource.USER_DELIVERY_ADDRESSES, Action.UPDATE, self.user_id, [address])

        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is None and field in _REQUIRED_FIELDS:
                continue
            setattr(address, field, value)
        self.db.flush()
        if address.is_priority:
            self._clear_other_priorities(address)
        self.db.commit()
        return address

    def delete(self, address_id: int) -> UserDeliveryAddress | None:
        address = self.db.get(UserDeliveryAddress, address_id)
        if address is None:
            return None
        enforce(self.acl, Resource.USER_DELIVERY_ADDRESSES, Action.DELETE, self.user_id, [address])

        self.db.delete(address)
        self.db.commit()
        logger.info("Delivery address deleted id=%s", address_id)
        return address

    def _find_identical(self, payload: NewDeliveryAddress) -> UserDeliveryAddress | None:
        stmt = select(UserDeliveryAddress).where(UserDeliveryAddress.user_id == payload.user_id)
        for field in _IDENTITY_FIELDS:
            column = getattr(UserDeliveryAddress, field)
            value = getattr(payload, field)
            stmt = stmt.where(column.is_(None) if value is None else column == value)
        return self.db.scalars(stmt).first()

    def _clear_other_priorities(self, address: UserDeliveryAddress) -> None:
        self.db.execute(
            update(UserDeliveryAddress)
            .where(UserDeliveryAddress.user_id == address.user_id, UserDeliveryAddress.id != address.id)
            .values(is_priority=False)
            .execution_options(synchronize_session="fetch")
        )
