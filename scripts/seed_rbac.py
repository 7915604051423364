"""
Seed script to populate reference roles, users and default assignment rules.

Run this script against an empty or existing database to create:
- The reference role catalogue (attribute scopes, app access, write windows)
- Sample users with their assignment history
- Default assignment rules by job title

Existing rows are left untouched.

Usage:
    python -m scripts.seed_rbac
"""
import asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_portal.core.database.engine import get_db, init_db
from rbac_portal.core.exceptions import NotFoundError
from rbac_portal.features.assignments.schemas import User
from rbac_portal.features.default_rules.schemas import DefaultAssignmentRule
from rbac_portal.features.repository import RBACRepository
from rbac_portal.features.roles.constants import APP_LIST
from rbac_portal.features.roles.schemas import Role
from rbac_portal.utils import get_logger


log = get_logger(__name__)


def _scopes(company, function, operation, ship, department, job_title):
    return [
        {"attribute": "Company", "values": company},
        {"attribute": "Function", "values": function},
        {"attribute": "Operation", "values": operation},
        {"attribute": "Ship", "values": ship},
        {"attribute": "Department", "values": department},
        {"attribute": "Job Title", "values": job_title},
    ]


def _apps(*entries):
    return [{"app_name": name, "actions": list(actions)} for name, actions in entries]


DEFAULT_ROLES = [
    {
        "id": "role-1",
        "name": "Ship Captain",
        "description": "Read/Write access to own ship's data only for NAU",
        "permissions": _scopes(["All"], ["Nautical"], ["All"], ["Dynamic"], ["All"], ["All"]),
        "write_restriction_days": 30,
        "functionality_access": "Both",
        "day_type_access": ["All"],
        "app_access": _apps(
            ("VPP", ["Read", "Write"]),
            ("Crew Schedule", ["Read", "Write"]),
            ("License View", ["Read", "Write"]),
        ),
    },
    {
        "id": "role-2",
        "name": "Ship Hotel Manager",
        "description": "Full Read/Write for a specific Ship for Catering",
        "permissions": _scopes(["All"], ["Catering"], ["All"], ["All"], ["Dynamic"], ["All"]),
        "write_restriction_days": None,
        "functionality_access": "Planning View",
        "day_type_access": ["W", "W1", "V"],
        "app_access": _apps(
            ("VPP", ["Read", "Write"]),
            ("Work Order", ["Read", "Write"]),
            ("Roster Assignment", ["Read", "Write"]),
        ),
    },
    {
        "id": "role-3",
        "name": "Corporate Captain",
        "description": "Read-only access to specific operations",
        "permissions": _scopes(["All"], ["Nautical"], ["Dynamic"], ["Dynamic"], ["All"], ["All"]),
        "functionality_access": "Scheduling View",
        "day_type_access": ["All"],
        "app_access": _apps(
            ("Authority Report", ["Read"]),
            ("FR Authority Report", ["Read"]),
            ("License View", ["Read"]),
        ),
    },
    {
        "id": "role-4",
        "name": "HR Admin",
        "description": "Read/Write data across company",
        "permissions": _scopes(["All"], ["Catering", "Nautical"], ["All"], ["All"], ["All"], ["All"]),
        "write_restriction_days": 10,
        "functionality_access": "Both",
        "day_type_access": ["All"],
        "app_access": _apps(
            ("Crew Schedule", ["Read", "Write"]),
            ("Import Manager", ["Read", "Write"]),
            ("VPP Payroll Download", ["Read", "Write"]),
            ("Roster Create", ["Read", "Write"]),
        ),
    },
    {
        "id": "role-5",
        "name": "Super Admin",
        "description": "Read/Write data across company",
        "permissions": _scopes(["All"], ["All"], ["All"], ["All"], ["All"], ["All"]),
        "write_restriction_days": None,
        "functionality_access": "Both",
        "day_type_access": ["All"],
        "app_access": _apps(*[(name, ["Read", "Write"]) for name in APP_LIST]),
    },
    {
        "id": "role-6",
        "name": "Exception Admin",
        "description": "Specific exception role for a project.",
        "permissions": _scopes(["FR01"], ["Catering"], ["FR01"], ["BLD"], ["All"], ["All"]),
        "functionality_access": "Planning View",
        "day_type_access": ["T", "TH"],
        "app_access": _apps(("VPP Plan Download", ["Read"])),
    },
]


DEFAULT_USERS = [
    {
        "id": "U001",
        "name": "Captain Müller",
        "job_title": "Captain",
        "department": "Nautical",
        "ship": "ATL",
        "roles": [{"role_id": "role-1", "assigned_on": "2025-01-01", "assigned_by": "Auto"}],
    },
    {
        "id": "U002",
        "name": "Captain Dubois",
        "job_title": "Captain",
        "department": "Nautical",
        "roles": [{"role_id": "role-1", "assigned_on": "2025-01-02", "assigned_by": "Auto"}],
    },
    {
        "id": "U003",
        "name": "Lisa Schmidt",
        "job_title": "Hotel Manager",
        "department": "F&B",
        "roles": [
            {"role_id": "role-2", "assigned_on": "2025-03-01", "assigned_by": "Auto"},
            {
                "role_id": "role-6",
                "assigned_on": "2024-07-01",
                "assigned_by": "Admin",
                "reason": "Temporary project lead",
                "start_date": "2024-07-01",
                "end_date": "2024-12-31",
            },
            {
                "role_id": "role-5",
                "assigned_on": "2023-01-01",
                "assigned_by": "Auto",
                "removed_on": "2024-02-01",
            },
            {
                "role_id": "role-3",
                "assigned_on": "2024-01-01",
                "assigned_by": "Admin",
                "reason": "Past project",
                "start_date": "2024-01-15",
                "end_date": "2024-03-15",
            },
        ],
    },
    {
        "id": "U004",
        "name": "John Carter",
        "job_title": "Corporate Captain",
        "department": "Nautical",
        "roles": [{"role_id": "role-3", "assigned_on": "2025-03-01", "assigned_by": "Auto"}],
    },
    {
        "id": "U005",
        "name": "Maria Rossi",
        "job_title": "HR",
        "department": "Corporate",
        "roles": [{"role_id": "role-4", "assigned_on": "2025-04-01", "assigned_by": "Auto"}],
    },
]


DEFAULT_RULES = [
    {"id": "rule-1", "job_title": "Captain", "role_ids": ["role-1"], "ship": "ATL"},
    {"id": "rule-2", "job_title": "Master Captain", "role_ids": ["role-1"]},
    {"id": "rule-3", "job_title": "Maitre D", "role_ids": ["role-2"], "function": "Catering"},
    {"id": "rule-4", "job_title": "Hotel Manager", "role_ids": ["role-2", "role-6"]},
    {"id": "rule-5", "job_title": "Nautic Scheduler", "role_ids": ["role-3"], "company": "CH01", "operation": "CHO"},
    {"id": "rule-6", "job_title": "HR", "role_ids": ["role-4"]},
]


async def seed_roles(repository: RBACRepository) -> int:
    """
    Create reference roles that do not exist yet.

    Returns:
        Number of roles created
    """
    log.info("Creating reference roles...")
    created = 0

    for role_config in DEFAULT_ROLES:
        role = Role.model_validate(role_config)
        try:
            await repository.get_role(role.id)
            log.debug(f"Role '{role.id}' already exists, skipping")
            continue
        except NotFoundError:
            pass

        await repository.save_role(role)
        created += 1
        log.info(f"Created role: {role.id} ({role.name})")

    return created


async def seed_users(repository: RBACRepository) -> int:
    log.info("Creating sample users...")
    created = 0

    for user_config in DEFAULT_USERS:
        user = User.model_validate(user_config)
        try:
            await repository.get_user(user.id)
            log.debug(f"User '{user.id}' already exists, skipping")
            continue
        except NotFoundError:
            pass

        await repository.save_user(user)
        created += 1
        log.info(f"Created user: {user.id} with {len(user.roles)} assignments")

    return created


async def seed_rules(repository: RBACRepository) -> int:
    log.info("Creating default assignment rules...")
    existing = {rule.id for rule in await repository.list_rules()}
    created = 0

    for rule_config in DEFAULT_RULES:
        rule = DefaultAssignmentRule.model_validate(rule_config)
        if rule.id in existing:
            log.debug(f"Rule '{rule.id}' already exists, skipping")
            continue
        await repository.save_rule(rule)
        created += 1
        log.info(f"Created rule: {rule.id} ({rule.job_title} -> {', '.join(rule.role_ids)})")

    return created


async def seed_all(db: AsyncSession) -> dict[str, int]:
    """Seed roles, users and rules in one transaction."""
    repository = RBACRepository(db)
    counts = {
        "roles": await seed_roles(repository),
        "users": await seed_users(repository),
        "rules": await seed_rules(repository),
    }
    await repository.commit()
    return counts


async def main():
    """Initialize tables and seed reference data."""
    log.info("Starting RBAC seeding...")

    log.info("Initializing database tables...")
    await init_db()

    async for db in get_db():
        try:
            counts = await seed_all(db)
            log.info(
                f"Seeding completed: roles={counts['roles']} users={counts['users']} rules={counts['rules']}"
            )
        except Exception as e:
            log.error(f"Error seeding RBAC data: {e}", exc_info=True)
            await db.rollback()
            raise

        break  # Only use first session


if __name__ == "__main__":
    asyncio.run(main())
