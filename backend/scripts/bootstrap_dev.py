"""
Dev bootstrap script — create a project with an owner and two contributors.

Usage:
    python -m scripts.bootstrap_dev [owner_id]

This will:
  1. Create a project named "Dev Project" owned by `owner_id` (default "dev-owner")
  2. Add "dev-admin" as ADMIN and "dev-reader" as READ
  3. Print the project id and its contributor list
"""

import asyncio
import sys

# Ensure the project root is on the path
sys.path.insert(0, ".")

from project_access.access.lifecycle import ContributorLifecycleManager
from project_access.access.roles import ProjectRole
from project_access.access.store import MembershipStore
from project_access.core.database import async_session_factory, engine
from project_access.services.projects import ProjectService


async def main(owner_id: str) -> None:
    async with async_session_factory() as session:
        store = MembershipStore(session)

        # ── Create project (+ OWNER row) ────────────────────
        project = await ProjectService(store).create_project(
            owner_id=owner_id,
            name="Dev Project",
            description="Seeded by scripts/bootstrap_dev.py",
        )

        # ── Add contributors ────────────────────────────────
        lifecycle = ContributorLifecycleManager(store)
        await lifecycle.add_contributor(project.id, "dev-admin", ProjectRole.ADMIN)
        await lifecycle.add_contributor(project.id, "dev-reader", ProjectRole.READ)
        contributors = await lifecycle.list_contributors(project.id)

    # ── Print results ───────────────────────────────────────
    print()
    print("=" * 60)
    print("  Dev Bootstrap Complete")
    print("=" * 60)
    print()
    print(f"  Project:    {project.name}")
    print(f"  Project ID: {project.id}")
    print()
    for contributor in contributors:
        print(f"  {contributor.role.value:<6} {contributor.user_id}")
    print()
    print(f"  Call the API with header  X-User-Id: {owner_id}")
    print("=" * 60)
    print()

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "dev-owner"))
