import math
from datetime import date, datetime, timedelta, timezone

import pytest

from app.models import Project, ProjectStatus


def _seed(db_session, count: int, **overrides) -> list[Project]:
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    rows = []
    for i in range(count):
        fields = {
            "name": f"Project {i:02d}",
            "client_name": f"Client {i % 3}",
            "created_at": base + timedelta(minutes=i),
            "updated_at": base + timedelta(minutes=i),
        }
        fields.update(overrides)
        rows.append(Project(**fields))
    db_session.add_all(rows)
    db_session.commit()
    return rows


def test_pages_of_twenty_five_rows(client, db_session):
    _seed(db_session, 25)
    sizes = []
    for page in (1, 2, 3):
        resp = client.get("/api/projects", params={"page": page, "limit": 10})
        assert resp.status_code == 200
        body = resp.json()
        assert body["pagination"] == {
            "page": page,
            "limit": 10,
            "total": 25,
            "totalPages": 3,
        }
        sizes.append(len(body["data"]))
    assert sizes == [10, 10, 5]


@pytest.mark.parametrize("limit", [1, 3, 7, 10, 25, 100])
def test_pages_partition_the_result_set(client, db_session, limit):
    _seed(db_session, 17)
    seen = []
    first = client.get("/api/projects", params={"limit": limit}).json()
    total_pages = first["pagination"]["totalPages"]
    assert total_pages == math.ceil(17 / limit)
    for page in range(1, total_pages + 1):
        body = client.get("/api/projects", params={"page": page, "limit": limit}).json()
        seen.extend(p["id"] for p in body["data"])
    assert len(seen) == 17
    assert len(set(seen)) == 17


def test_page_past_the_end_is_empty(client, db_session):
    _seed(db_session, 4)
    body = client.get("/api/projects", params={"page": 9, "limit": 2}).json()
    assert body["success"] is True
    assert body["data"] == []
    assert body["pagination"]["total"] == 4
    assert body["pagination"]["totalPages"] == 2


def test_far_page_is_empty_not_an_error(client, create_project):
    create_project()
    resp = client.get("/api/projects", params={"page": 10**19, "limit": 10})
    assert resp.status_code == 200
    body = resp.json()
    assert body["data"] == []
    assert body["pagination"]["total"] == 1
    assert body["pagination"]["totalPages"] == 1


def test_empty_store(client):
    body = client.get("/api/projects").json()
    assert body["data"] == []
    assert body["pagination"] == {"page": 1, "limit": 10, "total": 0, "totalPages": 0}


def test_default_order_is_newest_first(client, db_session):
    _seed(db_session, 3)
    names = [p["name"] for p in client.get("/api/projects").json()["data"]]
    assert names == ["Project 02", "Project 01", "Project 00"]


def test_sort_by_name_ascending_case_insensitive_order(client, db_session):
    _seed(db_session, 3)
    resp = client.get("/api/projects", params={"sortBy": "name", "order": "ASC"})
    names = [p["name"] for p in resp.json()["data"]]
    assert names == ["Project 00", "Project 01", "Project 02"]


def test_unknown_sort_and_order_fall_back(client, db_session):
    _seed(db_session, 3)
    resp = client.get(
        "/api/projects", params={"sortBy": "deletedAt; DROP TABLE projects", "order": "sideways"}
    )
    assert resp.status_code == 200
    names = [p["name"] for p in resp.json()["data"]]
    assert names == ["Project 02", "Project 01", "Project 00"]


def test_sort_by_start_date(client, db_session):
    db_session.add_all(
        [
            Project(name="Late", client_name="C", start_date=date(2026, 5, 1)),
            Project(name="Early", client_name="C", start_date=date(2026, 1, 1)),
        ]
    )
    db_session.commit()
    resp = client.get("/api/projects", params={"sortBy": "startDate", "order": "asc"})
    assert [p["name"] for p in resp.json()["data"]] == ["Early", "Late"]


def test_status_filter(client, db_session):
    _seed(db_session, 2)
    _seed(db_session, 3, status=ProjectStatus.on_hold)
    body = client.get("/api/projects", params={"status": "on_hold"}).json()
    assert body["pagination"]["total"] == 3
    assert {p["status"] for p in body["data"]} == {"on_hold"}


def test_unknown_status_filter_is_ignored(client, db_session):
    _seed(db_session, 2)
    resp = client.get("/api/projects", params={"status": "archived"})
    assert resp.status_code == 200
    assert resp.json()["pagination"]["total"] == 2


def test_search_matches_name_or_client(client, db_session):
    db_session.add_all(
        [
            Project(name="Mobile Banking App", client_name="Bank Mandiri"),
            Project(name="CRM Integration", client_name="PT Astra"),
            Project(name="HR System", client_name="Mobile Corp"),
        ]
    )
    db_session.commit()
    body = client.get("/api/projects", params={"search": "mobile"}).json()
    assert sorted(p["name"] for p in body["data"]) == ["HR System", "Mobile Banking App"]
    assert body["pagination"]["total"] == 2


def test_search_combines_with_status_filter(client, db_session):
    db_session.add_all(
        [
            Project(name="Alpha", client_name="X", status=ProjectStatus.completed),
            Project(name="Alpha Two", client_name="X"),
        ]
    )
    db_session.commit()
    body = client.get("/api/projects", params={"search": "Alpha", "status": "completed"}).json()
    assert [p["name"] for p in body["data"]] == ["Alpha"]


def test_search_treats_wildcards_literally(client, db_session):
    db_session.add_all(
        [
            Project(name="100% Uptime", client_name="Ops"),
            Project(name="Uptime", client_name="Ops"),
        ]
    )
    db_session.commit()
    body = client.get("/api/projects", params={"search": "100%"}).json()
    assert [p["name"] for p in body["data"]] == ["100% Uptime"]
    assert client.get("/api/projects", params={"search": "_"}).json()["data"] == []


def test_soft_deleted_rows_are_not_counted(client, db_session):
    rows = _seed(db_session, 3)
    rows[0].deleted_at = datetime.now(timezone.utc)
    db_session.commit()
    body = client.get("/api/projects").json()
    assert body["pagination"]["total"] == 2
    assert str(rows[0].id) not in {p["id"] for p in body["data"]}


@pytest.mark.parametrize(
    "params",
    [{"page": 0}, {"limit": 0}, {"limit": 101}, {"page": "two"}, {"search": "x" * 201}],
)
def test_invalid_query_params_are_400(client, params):
    resp = client.get("/api/projects", params=params)
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["errors"][0]["location"] == "query"
