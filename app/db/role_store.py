"""SQLAlchemy-backed role store used by the roles cache."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import DisconnectionError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from app.acl.errors import StoreConnectionError, StoreError
from app.acl.models import Role
from app.models.security import UserRole

logger = logging.getLogger(__name__)


class SqlRoleStore:
    """
    Reads role assignments from the `user_roles` table.

    Uses its own short-lived session per call: the roles cache is shared by
    all requests and must not borrow a request's session.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def list_roles_for_user(self, user_id: int) -> list[Role]:
        try:
            with self._session_factory() as db:
                rows = db.scalars(select(UserRole.role).where(UserRole.user_id == user_id).order_by(UserRole.id))
                return list(rows.all())
        except (OperationalError, DisconnectionError, PoolTimeoutError) as exc:
            logger.warning("Role store unreachable user_id=%s", user_id)
            raise StoreConnectionError(f"Cannot reach role store for user {user_id}") from exc
        except SQLAlchemyError as exc:
            logger.warning("Role store query failed user_id=%s", user_id)
            raise StoreError(f"Cannot list roles for user {user_id}") from exc
        except LookupError as exc:
            # Unknown role string in `user_roles.role`.
            logger.warning("Role store returned an unknown role user_id=%s", user_id)
            raise StoreError(f"Unknown role stored for user {user_id}") from exc
