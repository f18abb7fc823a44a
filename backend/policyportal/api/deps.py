"""Shared dependencies for API routes."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from policyportal.core.admins import AdminAllowList
from policyportal.core.config import settings
from policyportal.core.errors import ForbiddenError, InternalError, UnauthenticatedError
from policyportal.core.identity import Identity, SupabaseAuthClient
from policyportal.core.logging import get_logger
from policyportal.db.session import get_db
from policyportal.services import provisioning

logger = get_logger(__name__)

security_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_identity_provider() -> SupabaseAuthClient:
    """Process-wide identity provider client built from settings."""
    if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
        logger.error("Missing identity provider configuration")
        raise InternalError("Server configuration error")
    return SupabaseAuthClient(
        settings.SUPABASE_URL,
        settings.SUPABASE_SERVICE_ROLE_KEY,
        timeout=settings.IDENTITY_TIMEOUT_SECONDS,
    )


@lru_cache
def get_admin_allow_list() -> AdminAllowList:
    """Admin allow-list resolved once from ADMIN_ACCOUNTS."""
    return AdminAllowList(settings.ADMIN_ACCOUNTS)


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(security_scheme),
    identity_provider: SupabaseAuthClient = Depends(get_identity_provider),
) -> Identity:
    """Resolve the caller from the bearer token via the identity provider."""
    if credentials is None:
        raise UnauthenticatedError("Missing authorization header")

    identity = await identity_provider.get_user(credentials.credentials)
    if identity is None:
        raise UnauthenticatedError("Invalid authentication token")

    if not identity.has_uuid_id():
        logger.warning("Identity provider returned a non-UUID account id", user_id=identity.id)
        raise UnauthenticatedError("Invalid authentication token")

    return identity


async def require_admin(
    identity: Identity = Depends(get_current_identity),
    admins: AdminAllowList = Depends(get_admin_allow_list),
    db: AsyncSession = Depends(get_db),
) -> Identity:
    """Allow-listed identities only; registers the admin row on first use."""
    if not admins.is_admin(identity.email):
        logger.warning("Admin operation refused", user_id=identity.id, email=identity.email)
        raise ForbiddenError("Insufficient permissions")

    await provisioning.register_admin(db, identity, admins.display_name(identity.email))
    return identity
