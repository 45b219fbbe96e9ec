"""Access resolution and permission evaluation."""

import uuid

import pytest

from project_access.access.errors import CannotRemoveLastAdmin
from project_access.access.permissions import PermissionEvaluator
from project_access.access.resolver import AccessResolver
from project_access.access.roles import ProjectRole
from project_access.models.project import Project

from conftest import OWNER


@pytest.fixture
def resolver(store):
    return AccessResolver(store)


@pytest.fixture
def evaluator(store):
    return PermissionEvaluator(store)


# ── AccessResolver ──────────────────────────────────────────
async def test_stranger_reaches_nothing(resolver, project_id):
    assert await resolver.accessible_projects("stranger") == set()


async def test_one_contributor_row_exposes_exactly_that_project(
    resolver, lifecycle, projects, project_id,
):
    await projects.create_project(owner_id="someone-else", name="Unrelated")
    await lifecycle.add_contributor(project_id, "bob", ProjectRole.READ)

    assert await resolver.accessible_projects("bob") == {project_id}


async def test_owner_reaches_owned_projects(resolver, projects, project_id):
    second = await projects.create_project(owner_id=OWNER, name="Second")

    assert await resolver.accessible_projects(OWNER) == {project_id, second.id}


async def test_owner_resolves_without_owner_row(resolver, store):
    async with store.transaction():
        orphan = await store.insert_project(Project(name="Half-created", owner_id="carol"))
    orphan_id = orphan.id

    assert await resolver.accessible_projects("carol") == {orphan_id}


async def test_removed_contributor_loses_access(resolver, lifecycle, project_id):
    added = await lifecycle.add_contributor(project_id, "bob", ProjectRole.WRITE)
    await lifecycle.remove_contributor(project_id, added.id)

    assert await resolver.accessible_projects("bob") == set()


# ── PermissionEvaluator ─────────────────────────────────────
async def test_no_role_for_non_member(evaluator, project_id):
    assert await evaluator.user_role_for("stranger", project_id) is None
    for role in ProjectRole:
        assert not await evaluator.has_permission("stranger", project_id, role)


async def test_unknown_project_is_not_an_error(evaluator):
    assert not await evaluator.has_permission(OWNER, uuid.uuid4(), ProjectRole.READ)


async def test_owner_meets_every_requirement(evaluator, project_id):
    assert await evaluator.user_role_for(OWNER, project_id) is ProjectRole.OWNER
    for role in ProjectRole:
        assert await evaluator.has_permission(OWNER, project_id, role)


@pytest.mark.parametrize(
    "granted,allowed",
    [
        (ProjectRole.ADMIN, {ProjectRole.ADMIN, ProjectRole.WRITE, ProjectRole.READ}),
        (ProjectRole.WRITE, {ProjectRole.WRITE, ProjectRole.READ}),
        (ProjectRole.READ, {ProjectRole.READ}),
    ],
)
async def test_granted_role_bounds_permissions(
    evaluator, lifecycle, project_id, granted, allowed,
):
    await lifecycle.add_contributor(project_id, "bob", granted)

    for role in ProjectRole:
        assert await evaluator.has_permission("bob", project_id, role) == (role in allowed)


async def test_membership_walkthrough(evaluator, lifecycle, project_id):
    contributors = await lifecycle.list_contributors(project_id)
    assert [(c.user_id, c.role) for c in contributors] == [(OWNER, ProjectRole.OWNER)]

    bob = await lifecycle.add_contributor(project_id, "bob", ProjectRole.WRITE)
    bob_id = bob.id
    assert await evaluator.has_permission("bob", project_id, ProjectRole.WRITE)
    assert not await evaluator.has_permission("bob", project_id, ProjectRole.ADMIN)

    await lifecycle.update_role(project_id, bob_id, ProjectRole.ADMIN)
    assert await evaluator.has_permission("bob", project_id, ProjectRole.ADMIN)

    # Owner is not an ADMIN-role row, so bob is the last admin.
    with pytest.raises(CannotRemoveLastAdmin):
        await lifecycle.remove_contributor(project_id, bob_id)

    await lifecycle.add_contributor(project_id, "carol", ProjectRole.ADMIN)
    await lifecycle.remove_contributor(project_id, bob_id)

    assert await evaluator.user_role_for("bob", project_id) is None
