"""
Seed script to populate default permissions and roles.

Idempotent: existing permissions and roles are left untouched, so it is safe
to run on every deploy. The store is selected from AUTHZKIT_* environment
variables (memory when unset, which is only useful as a dry run).

Usage:
    python -m scripts.seed_permissions
"""
import asyncio
from typing import Dict, List

from authzkit import AlreadyExists, Authzkit
from authzkit.utils import get_logger


log = get_logger(__name__)


DEFAULT_PERMISSIONS = [
    # Articles
    "view_articles",
    "create_articles",
    "edit_articles",
    "delete_articles",
    "publish_articles",

    # Comments
    "view_comments",
    "moderate_comments",

    # Users
    "view_users",
    "manage_users",

    # Authorization management
    "manage_roles",
    "manage_permissions",
]


DEFAULT_ROLES: Dict[str, List[str]] = {
    "admin": DEFAULT_PERMISSIONS,
    "editor": [
        "view_articles", "create_articles", "edit_articles", "publish_articles",
        "view_comments", "moderate_comments",
    ],
    "author": ["view_articles", "create_articles", "edit_articles", "view_comments"],
    "moderator": ["view_articles", "view_comments", "moderate_comments"],
    "viewer": ["view_articles", "view_comments"],
}


async def seed_permissions(authzkit: Authzkit) -> int:
    """
    Create default permissions.

    Returns:
        Number of permissions created by this run
    """
    log.info("Creating default permissions...")
    created = 0
    for name in DEFAULT_PERMISSIONS:
        try:
            await authzkit.define_permission(name)
        except AlreadyExists:
            log.debug(f"Permission '{name}' already exists, skipping")
            continue
        created += 1

    log.info(f"Created {created} permissions")
    return created


async def seed_roles(authzkit: Authzkit) -> int:
    """
    Create default roles with their permissions.

    Returns:
        Number of roles created by this run
    """
    log.info("Creating default roles...")
    created = 0
    for role_name, permissions in DEFAULT_ROLES.items():
        try:
            await authzkit.define_role(role_name, permissions)
        except AlreadyExists:
            log.debug(f"Role '{role_name}' already exists, skipping")
            continue
        created += 1

    log.info(f"Created {created} roles")
    return created


async def main():
    """Main function to seed permissions and roles."""
    log.info("Starting permission seeding...")

    async with await Authzkit.from_config() as authzkit:
        try:
            await seed_permissions(authzkit)
            await seed_roles(authzkit)
        except Exception as e:
            log.error(f"Error seeding permissions: {e}", exc_info=True)
            raise

        log.info("Permission seeding completed successfully!")
        log.info("Default roles:")
        for role_name, permissions in DEFAULT_ROLES.items():
            log.info(f"  - {role_name}: {len(permissions)} permissions")


if __name__ == "__main__":
    asyncio.run(main())
