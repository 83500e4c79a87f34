import pytest

from conftest import make_user
from schemas.stores import PermissionRead


def grant(repo, user, store_id, role, can_view_cost=False):
    perm = PermissionRead(
        id=f"perm-{store_id}-{user.id}",
        user_id=str(user.id),
        store_id=store_id,
        role=role,
        can_view_cost=can_view_cost,
    )
    repo.permissions[perm.id] = perm


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "offline": True}


def test_item_search_folds_kana(client):
    response = client.get("/items/", params={"q": "こーひー"})
    assert response.status_code == 200
    names = [i["name"] for i in response.json()]
    assert len(names) == 3
    assert all("コーヒー" in n for n in names)

    response = client.get("/items/", params={"q": "こーひー", "include_discontinued": "true"})
    assert len(response.json()) == 4


def test_item_search_by_english_name_and_category(client):
    response = client.get("/items/", params={"q": "juice", "category_id": "cat-beverages"})
    assert sorted(i["id"] for i in response.json()) == ["item-apple-juice", "item-orange-juice"]


def test_create_item_rejects_case_duplicate(client):
    response = client.post("/items/", json={"name": "Widget"})
    assert response.status_code == 201
    assert response.json()["human_id"] == "ITM-0001"

    response = client.post("/items/", json={"name": "widget"})
    assert response.status_code == 409


def test_create_item_requires_name(client):
    response = client.post("/items/", json={"name": "   "})
    assert response.status_code == 422


def test_unknown_item_is_404(client):
    assert client.get("/items/item-missing").status_code == 404


def test_next_location_human_id(client):
    response = client.get("/locations/next-human-id", params={"store_id": "demo-shibuya"})
    assert response.status_code == 200
    assert response.json() == {"human_id": "KU"}


def test_locations_sorted_by_human_id(client):
    response = client.get("/locations/", params={"store_id": "demo-shibuya"})
    assert [loc["human_id"] for loc in response.json()] == ["BK", "FL", "KT"]


def test_sub_location_lifecycle(client):
    response = client.post("/locations/loc-gion-kitchen-pantry/sublocations", json={"name": "Shelf"})
    assert response.status_code == 201
    sub = response.json()["sublocations"][0]
    assert sub["human_id"] == "01"

    response = client.delete(f"/locations/loc-gion-kitchen-pantry/sublocations/{sub['id']}")
    assert response.status_code == 200
    assert response.json()["sublocations"] == []


def test_save_stocktakes_rejects_negative_count(client):
    response = client.put("/stocktakes/", json=[{
        "id": "new-1",
        "store_id": "demo-gion",
        "item_id": "item-water",
        "location_id": "loc-gion-kitchen-pantry",
        "last_count": -1,
    }])
    assert response.status_code == 422


def test_save_and_delete_stocktakes(client):
    response = client.put("/stocktakes/", json=[{
        "id": "new-1",
        "store_id": "demo-gion",
        "item_id": "item-water",
        "location_id": "loc-gion-kitchen-pantry",
        "last_count": 4,
    }])
    assert response.status_code == 200
    saved_id = response.json()[0]["id"]
    assert not saved_id.startswith("new-")

    response = client.post("/stocktakes/delete", json={
        "store_id": "demo-gion",
        "ids": [saved_id, "new-2", "st-s-1"],
    })
    # st-s-1 belongs to the other store
    assert response.json() == {"deleted": 1}


def test_save_stocktakes_unknown_location_is_400(client):
    response = client.put("/stocktakes/", json=[{
        "store_id": "demo-gion",
        "item_id": "item-water",
        "location_id": "loc-shibuya-floor",
        "last_count": 1,
    }])
    assert response.status_code == 400


def test_item_import_endpoint(client):
    csv_text = "name,sku,costA\nTea,T-1,100\nCoffee,,abc\n"
    response = client.post(
        "/imports/items",
        files={"file": ("items.csv", csv_text.encode("utf-8-sig"), "text/csv")},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["summary"] == {"created": 1, "updated": 0, "warning": 0, "error": 1}
    assert body["results"][1] == {"row": 3, "status": "Error", "message": "Invalid number in costA: abc"}


def test_item_import_rejects_non_utf8(client):
    response = client.post(
        "/imports/items",
        files={"file": ("items.csv", "name\nコーヒー\n".encode("shift_jis"), "text/csv")},
    )
    assert response.status_code == 400


def test_location_import_endpoint(client):
    csv_text = "humanId,name,description,parentHumanId\n,Top shelf,,F\nF,Back room,,\n"
    response = client.post(
        "/imports/locations",
        params={"store_id": "demo-gion"},
        files={"file": ("locations.csv", csv_text.encode(), "text/csv")},
    )
    assert response.status_code == 200
    assert response.json()["summary"]["created"] == 2


def test_templates(client):
    response = client.get("/imports/templates/locations")
    assert response.status_code == 200
    assert response.text == "humanId,name,description,parentHumanId"
    assert "location_template.csv" in response.headers["content-disposition"]
    assert client.get("/imports/templates/orders").status_code == 404


def test_stocktake_export(client):
    response = client.get("/exports/stocktakes.csv", params={"store_id": "demo-shibuya"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "item-assignments.csv" in response.headers["content-disposition"]
    lines = response.text.split("\r\n")
    assert lines[0].startswith("stocktakeId,storeId,storeName,itemId")
    assert len(lines) == 12


def test_item_export_has_costs_for_admin(client):
    response = client.get("/exports/items.csv")
    lines = response.text.split("\r\n")
    assert lines[0] == "itemId,humanId,nameJa,nameEn,shortName,description,sku,costA,costB,supplier,imageUrl,categoryId"
    water = next(line for line in lines if line.startswith("item-water,"))
    assert ",80,100," in water


def test_viewer_sees_only_granted_stores_and_no_costs(client, repo, login_as):
    viewer = login_as(make_user())
    grant(repo, viewer, "demo-gion", "Viewer")

    stores = client.get("/stores/").json()
    assert [s["id"] for s in stores] == ["demo-gion"]

    items = client.get("/items/").json()
    assert items
    assert all(i["cost_a"] is None and i["cost_b"] is None for i in items)

    assert client.get("/locations/", params={"store_id": "demo-shibuya"}).status_code == 403
    assert client.post("/items/", json={"name": "Widget"}).status_code == 403


def test_editor_without_cost_permission_cannot_change_costs(client, repo, login_as):
    editor = login_as(make_user())
    grant(repo, editor, "demo-gion", "Editor")

    response = client.patch("/items/item-water", json={"cost_a": 1})
    assert response.status_code == 403
    response = client.patch("/items/item-water", json={"short_name": "Water"})
    assert response.status_code == 200
    assert response.json()["cost_a"] is None


def test_user_without_grants_is_forbidden(client, login_as):
    login_as(make_user())
    assert client.get("/items/").status_code == 403
    assert client.get("/stores/").json() == []


def test_image_upload_unavailable_offline(client):
    response = client.post(
        "/images/items/item-water",
        files={"file": ("water.png", b"\x89PNG" + b"0" * 200, "image/png")},
    )
    assert response.status_code == 400


def test_imports_require_admin(client, repo, login_as):
    editor = login_as(make_user())
    grant(repo, editor, "demo-gion", "Editor")
    item_count = len(repo.items)

    response = client.post(
        "/imports/items",
        files={"file": ("items.csv", b"name,costA\nWidget,1\n", "text/csv")},
    )
    assert response.status_code == 403
    assert len(repo.items) == item_count

    response = client.post(
        "/imports/locations",
        params={"store_id": "demo-gion"},
        files={"file": ("locations.csv", b"humanId,name\nF,Back room\n", "text/csv")},
    )
    assert response.status_code == 403


def test_store_admin_can_import_locations_into_their_store(client, repo, login_as):
    admin = login_as(make_user())
    grant(repo, admin, "demo-gion", "Admin")
    files = {"file": ("locations.csv", b"humanId,name\nF,Back room\n", "text/csv")}

    response = client.post("/imports/locations", params={"store_id": "demo-gion"}, files=files)
    assert response.status_code == 200
    assert response.json()["summary"]["created"] == 1

    response = client.post("/imports/locations", params={"store_id": "demo-shibuya"}, files=files)
    assert response.status_code == 403


def test_item_import_with_stray_carriage_return(client):
    response = client.post(
        "/imports/items",
        files={"file": ("items.csv", b"name,description\nTea,line1\rline2\n", "text/csv")},
    )
    assert response.status_code == 200
    assert response.json()["summary"]["created"] == 1
