from types import SimpleNamespace

from core import permissions as perms
from schemas.stores import PermissionRead

STAFF = SimpleNamespace(id="user-1", is_superuser=False)
OWNER = SimpleNamespace(id="user-9", is_superuser=True)

GRANTS = [
    PermissionRead(id="p1", user_id="user-1", store_id="gion", role="Editor", can_view_cost=False),
    PermissionRead(id="p2", user_id="user-1", store_id="shibuya", role="Viewer", can_view_cost=True),
    PermissionRead(id="p3", user_id="user-1", store_id="osaka", role="No Access", can_view_cost=True),
    PermissionRead(id="p4", user_id="user-2", store_id="osaka", role="Admin", can_view_cost=True),
]


def test_role_for_store():
    assert perms.role_for_store(STAFF, GRANTS, "gion") == perms.EDITOR
    assert perms.role_for_store(STAFF, GRANTS, "kobe") == perms.NO_ACCESS
    assert perms.role_for_store(OWNER, [], "kobe") == perms.ADMIN


def test_role_ranking():
    assert perms.has_store_role(STAFF, GRANTS, "gion", perms.VIEWER)
    assert perms.has_store_role(STAFF, GRANTS, "gion", perms.EDITOR)
    assert not perms.has_store_role(STAFF, GRANTS, "gion", perms.ADMIN)
    assert not perms.has_store_role(STAFF, GRANTS, "shibuya", perms.EDITOR)
    assert not perms.has_store_role(STAFF, GRANTS, "osaka", perms.VIEWER)


def test_catalog_access_uses_best_store_role():
    assert perms.has_any_store_role(STAFF, GRANTS, perms.EDITOR)
    assert not perms.has_any_store_role(STAFF, GRANTS, perms.ADMIN)
    stranger = SimpleNamespace(id="user-3", is_superuser=False)
    assert not perms.has_any_store_role(stranger, GRANTS, perms.VIEWER)


def test_cost_visibility():
    assert perms.can_view_cost(STAFF, GRANTS)
    assert perms.can_view_cost(STAFF, GRANTS, "shibuya")
    assert not perms.can_view_cost(STAFF, GRANTS, "gion")
    # the flag does nothing without access to the store
    assert not perms.can_view_cost(STAFF, GRANTS, "osaka")
    assert perms.can_view_cost(OWNER, [], "gion")


def test_visible_store_ids():
    assert perms.visible_store_ids(STAFF, GRANTS) == ["gion", "shibuya"]
    assert perms.visible_store_ids(OWNER, GRANTS) is None
