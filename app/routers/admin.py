from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from app.acl.guard import enforce
from app.acl.models import Action, Resource
from app.repos.factory import ReposFactory
from app.security.context import Principal
from app.security.dependencies import get_principal, get_repos_factory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/roles-cache/clear", status_code=status.HTTP_204_NO_CONTENT)
def clear_roles_cache(
    principal: Principal = Depends(get_principal),
    factory: ReposFactory = Depends(get_repos_factory),
) -> None:
    # Dropping every cached assignment is as strong as deleting role rows.
    enforce(factory.engine_for(principal.user_id), Resource.USER_ROLES, Action.DELETE, principal.user_id)
    factory.roles_cache.clear()
    logger.info("Roles cache reset by user_id=%s", principal.user_id)
