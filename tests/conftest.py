"""
Shared pytest fixtures.

Provides:
- Reference roles, users and default rules (the seed catalogue)
- A fixed clock
- An in-memory SQLite session with all tables created
"""
from datetime import date

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rbac_portal.core.clock import FixedClock
from rbac_portal.core.database.engine import build_engine, init_db
from rbac_portal.features.assignments.schemas import User
from rbac_portal.features.default_rules.schemas import DefaultAssignmentRule
from rbac_portal.features.roles.constants import Attribute
from rbac_portal.features.roles.schemas import AccessContext, Role
from scripts.seed_rbac import DEFAULT_ROLES, DEFAULT_RULES, DEFAULT_USERS, seed_all


# ============================================================================
# Reference data
# ============================================================================

@pytest.fixture
def roles() -> list[Role]:
    return [Role.model_validate(config) for config in DEFAULT_ROLES]


@pytest.fixture
def roles_by_id(roles) -> dict[str, Role]:
    return {role.id: role for role in roles}


@pytest.fixture
def users() -> list[User]:
    return [User.model_validate(config) for config in DEFAULT_USERS]


@pytest.fixture
def users_by_id(users) -> dict[str, User]:
    return {user.id: user for user in users}


@pytest.fixture
def rules() -> list[DefaultAssignmentRule]:
    return [DefaultAssignmentRule.model_validate(config) for config in DEFAULT_RULES]


@pytest.fixture
def today() -> date:
    return date(2025, 1, 15)


@pytest.fixture
def clock(today) -> FixedClock:
    return FixedClock(today)


@pytest.fixture
def captain_context() -> AccessContext:
    """A nautical record on ship ATL, requested by a caller serving on ATL."""
    return AccessContext(
        values={
            Attribute.COMPANY: "CH01",
            Attribute.FUNCTION: "Nautical",
            Attribute.OPERATION: "CHO",
            Attribute.SHIP: "ATL",
            Attribute.DEPARTMENT: "Deck",
            Attribute.JOB_TITLE: "Captain",
        },
        caller_values={Attribute.SHIP: "ATL"},
    )


# ============================================================================
# Database
# ============================================================================

@pytest_asyncio.fixture
async def engine():
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db(engine) -> AsyncSession:
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seeded_db(db) -> AsyncSession:
    await seed_all(db)
    return db
