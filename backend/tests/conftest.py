"""
Shared fixtures.

The app runs against a throwaway SQLite file through aiosqlite, with the
identity provider replaced by an in-memory fake. Rows are seeded and
inspected through a plain sync session on the same file.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

from policyportal.api.deps import get_admin_allow_list, get_db, get_identity_provider
from policyportal.core.admins import AdminAllowList
from policyportal.core.identity import Identity
from policyportal.db.models import (
    Base,
    Family,
    FamilyMember,
    Policy,
    PolicyRequest,
    Profile,
)
from policyportal.main import app

ADMIN_EMAIL = "haley@admin.com"
ADMIN_ACCOUNTS = {
    "haley@admin.com": "haley",
    "jigar@admin.com": "jigar",
    "priyal@admin.com": "priyal",
}


def at(day: int) -> datetime:
    """A fixed timestamp in January 2024, for ordering assertions."""
    return datetime(2024, 1, day, 12, 0, tzinfo=timezone.utc)


class FakeIdentityProvider:
    """Token → identity lookup plus an account store, all in memory."""

    def __init__(self) -> None:
        self.tokens: dict[str, Identity] = {}
        self.created: list[Identity] = []
        self.create_error: Exception | None = None
        self.next_account_id: str | None = None

    async def get_user(self, token: str) -> Identity | None:
        return self.tokens.get(token)

    async def create_user(
        self,
        *,
        email: str,
        password: str,
        user_metadata: dict[str, Any] | None = None,
    ) -> Identity:
        if self.create_error is not None:
            raise self.create_error
        account = Identity(
            id=self.next_account_id or str(uuid.uuid4()),
            email=email,
            user_metadata=user_metadata or {},
        )
        self.created.append(account)
        return account


@dataclass
class SeededUser:
    id: uuid.UUID
    email: str
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


class Seeder:
    """Inserts rows directly, committing after each call."""

    def __init__(self, session: Session, identity_provider: FakeIdentityProvider) -> None:
        self.session = session
        self.identity_provider = identity_provider

    def _save(self, row):
        self.session.add(row)
        self.session.commit()
        return row

    def user(
        self,
        email: str,
        first_name: str | None = None,
        last_name: str | None = None,
        *,
        with_profile: bool = True,
    ) -> SeededUser:
        user_id = uuid.uuid4()
        token = f"token-{user_id.hex}"
        self.identity_provider.tokens[token] = Identity(id=str(user_id), email=email)
        if with_profile:
            self._save(
                Profile(id=user_id, email=email, first_name=first_name, last_name=last_name)
            )
        return SeededUser(id=user_id, email=email, token=token)

    def family(self, name: str, email: str = "", *, created_at: datetime | None = None) -> Family:
        return self._save(
            Family(
                family_name=name,
                primary_contact_email=email or f"{name.lower().replace(' ', '.')}@example.com",
                created_at=created_at or at(1),
            )
        )

    def member(
        self,
        family: Family,
        user_id: uuid.UUID,
        *,
        relationship: str | None = None,
        is_primary: bool = False,
        joined_at: datetime | None = None,
    ) -> FamilyMember:
        return self._save(
            FamilyMember(
                family_id=family.id,
                user_id=user_id,
                relationship_=relationship,
                is_primary=is_primary,
                joined_at=joined_at or at(1),
            )
        )

    def policy(
        self,
        family: Family,
        holder_id: uuid.UUID,
        policy_type: str = "Health",
        *,
        created_at: datetime | None = None,
        **fields: Any,
    ) -> Policy:
        return self._save(
            Policy(
                family_id=family.id,
                policy_holder_id=holder_id,
                policy_type=policy_type,
                created_at=created_at or at(1),
                **fields,
            )
        )

    def request(
        self,
        family: Family,
        requested_by: uuid.UUID,
        request_type: str,
        request_data: dict[str, Any],
        *,
        policy_id: uuid.UUID | None = None,
        created_at: datetime | None = None,
    ) -> PolicyRequest:
        return self._save(
            PolicyRequest(
                family_id=family.id,
                requested_by=requested_by,
                request_type=request_type,
                policy_id=policy_id,
                request_data=request_data,
                created_at=created_at or at(1),
            )
        )


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "portal.db"


@pytest.fixture
def db(db_path):
    """Sync session for seeding and inspecting rows."""
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    engine.dispose()


def fetch_all(db: Session, model, *criteria):
    """Fresh rows of `model`, ignoring anything cached in the session."""
    db.expire_all()
    return list(db.scalars(select(model).where(*criteria)))


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def seed(db, identity_provider) -> Seeder:
    return Seeder(db, identity_provider)


@pytest.fixture
def admin(seed) -> SeededUser:
    return seed.user(ADMIN_EMAIL, "Haley", "Admin")


@pytest.fixture
def async_engine(request, db, db_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    foreign_keys = request.node.get_closest_marker("foreign_keys") is not None

    # pysqlite's own transaction handling breaks SAVEPOINT; let SQLAlchemy emit BEGIN
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        if foreign_keys:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


@pytest.fixture
def client(async_engine, identity_provider):
    session_factory = async_sessionmaker(async_engine, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_provider] = lambda: identity_provider
    app.dependency_overrides[get_admin_allow_list] = lambda: AdminAllowList(ADMIN_ACCOUNTS)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()
