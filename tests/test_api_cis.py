import uuid

from cmdb.core import RepositoryException
from cmdb.inventory.interfaces.controllers import get_ci_repository
from cmdb.main import app

from tests.conftest import WEB_01


def test_health_check(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "OK"
    assert "timestamp" in body


def test_responses_carry_tracing_headers(client):
    response = client.get("/api/health", headers={"X-Correlation-ID": "abc-123"})
    assert response.headers["X-Correlation-ID"] == "abc-123"
    assert response.headers["X-Response-Time"].endswith("s")

    generated = client.get("/api/health").headers["X-Correlation-ID"]
    assert uuid.UUID(generated)


def test_create_ci(client):
    response = client.post("/api/cis", json=WEB_01)
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True

    data = body["data"]
    assert data["name"] == "WEB-01"
    assert uuid.UUID(data["id"])
    assert data["updatedAt"] == data["createdAt"]
    assert data["hostname"] is None


def test_create_ci_with_optional_fields(client):
    payload = {
        **WEB_01,
        "hostname": "web-01.company.com",
        "ipAddress": "192.168.1.11",
        "businessService": "E-commerce Platform",
        "metadata": {"rack": "R12"},
    }
    data = client.post("/api/cis", json=payload).json()["data"]
    assert data["ipAddress"] == "192.168.1.11"
    assert data["businessService"] == "E-commerce Platform"
    assert data["metadata"] == {"rack": "R12"}


def test_create_ci_ids_are_unique(create_ci):
    first = create_ci()
    second = create_ci(name="WEB-02")
    assert first["id"] != second["id"]


def test_create_ci_missing_field_is_400(client):
    payload = {key: value for key, value in WEB_01.items() if key != "name"}
    response = client.post("/api/cis", json=payload)
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation failed"
    assert any("name" in error["loc"] for error in body["details"])


def test_create_ci_invalid_status_is_400(client):
    response = client.post("/api/cis", json={**WEB_01, "status": "Broken"})
    assert response.status_code == 400


def test_list_cis(client, create_ci):
    assert client.get("/api/cis").json() == {"success": True, "data": []}

    create_ci()
    create_ci(name="DB-01", type="Database")
    data = client.get("/api/cis").json()["data"]
    assert sorted(ci["name"] for ci in data) == ["DB-01", "WEB-01"]


def test_get_ci(client, create_ci):
    ci = create_ci()
    response = client.get(f"/api/cis/{ci['id']}")
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "WEB-01"


def test_get_unknown_ci_is_404(client):
    response = client.get(f"/api/cis/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Configuration item not found"}


def test_get_malformed_id_is_404(client):
    assert client.get("/api/cis/not-a-uuid").status_code == 404


def test_update_ci_is_partial(client, create_ci):
    ci = create_ci(hostname="web-01.local")
    response = client.put(f"/api/cis/{ci['id']}", json={"status": "Maintenance"})
    assert response.status_code == 200

    data = response.json()["data"]
    assert data["status"] == "Maintenance"
    assert data["name"] == "WEB-01"
    assert data["hostname"] == "web-01.local"
    assert data["updatedAt"] != ci["updatedAt"]


def test_update_ci_rejects_null_required_field(client, create_ci):
    ci = create_ci()
    response = client.put(f"/api/cis/{ci['id']}", json={"name": None})
    assert response.status_code == 400


def test_update_unknown_ci_is_404(client):
    response = client.put(f"/api/cis/{uuid.uuid4()}", json={"status": "Inactive"})
    assert response.status_code == 404


def test_delete_ci_twice(client, create_ci):
    ci = create_ci()

    first = client.delete(f"/api/cis/{ci['id']}")
    assert first.status_code == 200
    assert first.json() == {"success": True, "message": "Configuration item deleted"}

    second = client.delete(f"/api/cis/{ci['id']}")
    assert second.status_code == 404
    assert client.get(f"/api/cis/{ci['id']}").status_code == 404


def test_store_failure_returns_generic_500(client):
    class FailingRepository:
        async def get_all(self):
            raise RepositoryException("Store failure during list configuration items: disk I/O error")

    app.dependency_overrides[get_ci_repository] = lambda: FailingRepository()
    try:
        response = client.get("/api/cis")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to fetch configuration items"}


# ========== Relationships ==========

def test_create_and_list_relationships(client, create_ci):
    web = create_ci()
    db = create_ci(name="DB-01", type="Database")

    response = client.post(
        f"/api/cis/{web['id']}/relationships",
        json={"targetId": db["id"], "relationshipType": "depends_on"},
    )
    assert response.status_code == 201
    created = response.json()["data"]
    assert created["sourceId"] == web["id"]
    assert created["targetId"] == db["id"]

    listed = client.get(f"/api/cis/{web['id']}/relationships").json()["data"]
    assert [rel["id"] for rel in listed] == [created["id"]]
    assert client.get(f"/api/cis/{db['id']}/relationships").json()["data"] == []


def test_relationship_type_defaults_to_depends_on(client, create_ci):
    web = create_ci()
    db = create_ci(name="DB-01")
    data = client.post(
        f"/api/cis/{web['id']}/relationships", json={"targetId": db["id"]}
    ).json()["data"]
    assert data["relationshipType"] == "depends_on"


def test_relationship_from_unknown_source_is_404(client, create_ci):
    target = create_ci()
    response = client.post(
        f"/api/cis/{uuid.uuid4()}/relationships", json={"targetId": target["id"]}
    )
    assert response.status_code == 404


def test_relationship_to_unknown_target_is_400(client, create_ci):
    source = create_ci()
    response = client.post(
        f"/api/cis/{source['id']}/relationships", json={"targetId": str(uuid.uuid4())}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Validation failed"


def test_deleting_ci_removes_its_relationships(client, create_ci):
    web = create_ci()
    db = create_ci(name="DB-01")
    client.post(f"/api/cis/{web['id']}/relationships", json={"targetId": db["id"]})

    client.delete(f"/api/cis/{db['id']}")
    assert client.get(f"/api/cis/{web['id']}/relationships").json()["data"] == []


# ========== Topology ==========

def test_topology_json(client, create_ci):
    web = create_ci()
    db = create_ci(name="DB-01", type="Database")
    lb = create_ci(name="LB-01", type="Network")
    client.post(f"/api/cis/{web['id']}/relationships", json={"targetId": db["id"]})
    client.post(
        f"/api/cis/{web['id']}/relationships",
        json={"targetId": lb["id"], "relationshipType": "connects_to"},
    )

    response = client.get(f"/api/cis/{web['id']}/topology")
    assert response.status_code == 200
    data = response.json()["data"]

    central = data["nodes"][0]
    assert central["id"] == web["id"]
    assert (central["x"], central["y"], central["level"]) == (300.0, 200.0, 0)
    assert [node["ci"]["name"] for node in data["nodes"][1:]] == ["DB-01", "LB-01"]
    assert data["nodes"][1]["x"] == 420.0
    assert {link["type"] for link in data["links"]} == {"depends_on", "connects_to"}


def test_topology_without_relationships_is_single_node(client, create_ci):
    web = create_ci()
    data = client.get(f"/api/cis/{web['id']}/topology").json()["data"]
    assert len(data["nodes"]) == 1
    assert data["links"] == []


def test_topology_of_unknown_ci_is_404(client):
    assert client.get(f"/api/cis/{uuid.uuid4()}/topology").status_code == 404


def test_topology_svg(client, create_ci):
    web = create_ci(hostname="web-01.company.com")
    db = create_ci(name="DB-01", type="Database", status="Maintenance")
    client.post(f"/api/cis/{web['id']}/relationships", json={"targetId": db["id"]})

    response = client.get(
        f"/api/cis/{web['id']}/topology.svg",
        params={"zoom": 1.5, "selected": web["id"], "details": "true"},
    )
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")

    svg = response.text
    assert "topology-node-WEB-01" in svg
    assert "depends on" in svg
    assert "Hostname: web-01.company.com" in svg
    assert "scale(1.5)" in svg


def test_topology_svg_rejects_out_of_range_zoom(client, create_ci):
    web = create_ci()
    response = client.get(f"/api/cis/{web['id']}/topology.svg", params={"zoom": 3})
    assert response.status_code == 400


def test_topology_svg_rejects_unknown_selection(client, create_ci):
    web = create_ci()
    response = client.get(
        f"/api/cis/{web['id']}/topology.svg", params={"selected": str(uuid.uuid4())}
    )
    assert response.status_code == 400


def test_unhandled_error_keeps_correlation_header(client):
    class BrokenRepository:
        async def get_all(self):
            raise RuntimeError("boom")

    app.dependency_overrides[get_ci_repository] = lambda: BrokenRepository()
    try:
        response = client.get("/api/cis", headers={"X-Correlation-ID": "trace-500"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Internal server error"}
    assert response.headers["X-Correlation-ID"] == "trace-500"


def test_topology_svg_accepts_uppercase_selection(client, create_ci):
    web = create_ci()
    response = client.get(
        f"/api/cis/{web['id']}/topology.svg", params={"selected": web["id"].upper()}
    )
    assert response.status_code == 200
    assert 'class="node selected"' in response.text


def test_topology_svg_accepts_braced_selection(client, create_ci):
    web = create_ci()
    response = client.get(
        f"/api/cis/{web['id']}/topology.svg", params={"selected": "{" + web["id"] + "}"}
    )
    assert response.status_code == 200
    assert 'class="node selected"' in response.text
