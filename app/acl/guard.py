from __future__ import annotations

import logging
from collections.abc import Sequence

from app.acl.engine import AclEngine
from app.acl.errors import UnauthorizedError
from app.acl.models import Action, Resource, ScopeCapability

logger = logging.getLogger(__name__)


def enforce(
    engine: AclEngine,
    resource: Resource,
    action: Action,
    acting_user_id: int | None,
    candidates: Sequence[ScopeCapability] = (),
) -> None:
    """
    Raise UnauthorizedError unless `engine` allows the request.

    Engine errors (AclConnectionError, AclUnknownError) pass through as is.

    Call it after fetching for reads (discard the rows on error) and before
    writing for creates whose owner is known up front.
    """

    if engine.can(resource, action, acting_user_id, candidates):
        return

    logger.info(
        "Access denied user_id=%s resource=%s action=%s candidates=%s",
        acting_user_id,
        resource.value,
        action.value,
        len(candidates),
    )
    raise UnauthorizedError(resource, action)
