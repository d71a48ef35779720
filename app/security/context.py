from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Principal:
    """
    Per-request acting principal.

    `user_id` is None for anonymous requests. Attached to request.state so
    handlers and repositories agree on who is acting.
    """

    user_id: int | None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None
