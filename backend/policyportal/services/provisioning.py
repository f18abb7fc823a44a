"""
Admin provisioning: account creation and lazy admin registration.

Both operations follow a "best effort, report what happened" policy for
their secondary write: the primary action succeeds even when the profile
upsert or the admin_users insert fails.
"""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from policyportal.api.schemas.users import CreateUserRequest, CreatedUserOut, CreateUserResponse
from policyportal.core.errors import BadRequestError, IdentityProviderError
from policyportal.core.identity import Identity, SupabaseAuthClient
from policyportal.core.logging import get_logger
from policyportal.repositories import admin_users as admin_repository
from policyportal.repositories import profiles as profile_repository

logger = get_logger(__name__)


async def register_admin(db: AsyncSession, identity: Identity, admin_name: str) -> bool:
    """
    Make sure an allow-listed identity has an admin_users row.

    Idempotent; never raises. Returns True only when a row was created.
    """
    try:
        created = await admin_repository.insert_if_absent(
            db, user_id=identity.user_id, admin_name=admin_name
        )
    except SQLAlchemyError as exc:
        logger.error(
            "Error creating admin record",
            user_id=identity.id,
            error=type(exc).__name__,
            reason=str(getattr(exc, "orig", None) or exc),
        )
        return False

    if created:
        logger.info("Admin record created", user_id=identity.id, admin_name=admin_name)
    return created


async def create_user(
    db: AsyncSession,
    identity_provider: SupabaseAuthClient,
    body: CreateUserRequest,
) -> CreateUserResponse:
    """Create a confirmed account, then mirror it into profiles."""
    logger.info("Creating user account", email=body.email)
    try:
        account = await identity_provider.create_user(
            email=body.email,
            password=body.password,
            user_metadata={"first_name": body.first_name, "last_name": body.last_name},
        )
    except IdentityProviderError as exc:
        if exc.is_client_error:
            logger.warning("Identity provider refused account", email=body.email, error=exc.details)
            raise BadRequestError("Failed to create user account", details=exc.details) from exc
        raise

    profile_synced = True
    try:
        async with db.begin_nested():
            await profile_repository.upsert_profile(
                db,
                profile_id=account.user_id,
                email=body.email,
                first_name=body.first_name,
                last_name=body.last_name,
            )
    except (SQLAlchemyError, ValueError) as exc:
        profile_synced = False
        logger.warning(
            "Profile creation/update warning",
            user_id=account.id,
            error=str(exc),
        )

    return CreateUserResponse(
        user=CreatedUserOut(
            id=account.id,
            email=account.email or body.email,
            first_name=body.first_name,
            last_name=body.last_name,
        ),
        profile_synced=profile_synced,
    )
