from __future__ import annotations

from app.models.audit_log import AuditLog
from app.models.membership import Membership
from app.models.task import TASK_PRIORITIES, Task


def _org(c, name="Acme"):
    res = c.post("/api/orgs", json={"name": name})
    assert res.status_code == 201
    return res.json()["organization"]["id"]


def _project(c, org_id, name="Roadmap"):
    res = c.post(f"/api/orgs/{org_id}/projects", json={"name": name})
    assert res.status_code == 201
    return res.json()["project"]


def _board(c, project_id):
    res = c.get(f"/api/projects/{project_id}/board")
    assert res.status_code == 200
    return res.json()["columns"]


def _task(c, project_id, **fields):
    body = {"title": "Write docs", **fields}
    res = c.post(f"/api/projects/{project_id}/tasks", json=body)
    assert res.status_code == 201, res.text
    return res.json()["task"]


def _actions(db_session, project_id):
    rows = db_session.query(AuditLog).filter(AuditLog.project_id == project_id).all()
    return sorted(r.action for r in rows)


def test_new_project_gets_default_columns(client, db_session):
    project = _project(client, _org(client))

    columns = _board(client, project["id"])
    assert [(c["name"], c["position"]) for c in columns] == [("Backlog", 0), ("In Progress", 1), ("Done", 2)]
    assert all(c["tasks"] == [] for c in columns)
    assert _actions(db_session, project["id"]) == ["project.created"]


def test_list_projects(client):
    org_id = _org(client)
    _project(client, org_id, "One")
    _project(client, org_id, "Two")

    projects = client.get(f"/api/orgs/{org_id}/projects").json()["projects"]
    assert [p["name"] for p in projects] == ["One", "Two"]


def test_task_defaults_to_backlog_and_medium(client):
    project = _project(client, _org(client))

    task = _task(client, project["id"])
    assert task["priority"] == "MEDIUM"
    assert task["labelIds"] == []

    columns = _board(client, project["id"])
    assert columns[0]["tasks"][0]["id"] == task["id"]


def test_task_in_explicit_column(client):
    project = _project(client, _org(client))
    done = _board(client, project["id"])[2]

    task = _task(client, project["id"], columnId=done["id"], priority="HIGH")
    assert task["columnId"] == done["id"]
    assert task["priority"] == "HIGH"


def test_task_in_column_of_other_project_is_rejected(client):
    org_id = _org(client)
    p1 = _project(client, org_id, "One")
    p2 = _project(client, org_id, "Two")
    foreign = _board(client, p2["id"])[0]

    res = client.post(f"/api/projects/{p1['id']}/tasks", json={"title": "x", "columnId": foreign["id"]})
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid columnId for this project"}


def test_create_task_in_missing_project_is_404(client):
    res = client.post("/api/projects/missing/tasks", json={"title": "x"})
    assert res.status_code == 404
    assert res.json() == {"error": "Project not found"}


def test_update_task_records_changed_fields(client, db_session):
    project = _project(client, _org(client))
    task = _task(client, project["id"])

    res = client.patch(f"/api/tasks/{task['id']}", json={"title": "Write better docs", "dueDate": None})
    assert res.status_code == 200
    assert res.json()["task"]["title"] == "Write better docs"

    entry = db_session.query(AuditLog).filter(AuditLog.action == "task.updated").one()
    assert entry.details == {"changedFields": ["dueDate", "title"]}
    assert entry.task_id == task["id"]


def test_update_task_requires_fields(client):
    project = _project(client, _org(client))
    task = _task(client, project["id"])

    res = client.patch(f"/api/tasks/{task['id']}", json={})
    assert res.status_code == 400
    assert res.json() == {"error": "No fields to update"}


def test_update_task_title_cannot_be_null(client):
    project = _project(client, _org(client))
    task = _task(client, project["id"])

    res = client.patch(f"/api/tasks/{task['id']}", json={"title": None})
    assert res.status_code == 400
    assert res.json() == {"error": "title cannot be null"}


def test_assignee_must_be_org_member(client, users, db_session):
    org_id = _org(client)
    project = _project(client, org_id)
    task = _task(client, project["id"])
    _, user_b = users

    res = client.patch(f"/api/tasks/{task['id']}", json={"assigneeUserId": user_b.id})
    assert res.status_code == 400
    assert res.json() == {"error": "Assignee must be a member of this organization"}

    db_session.add(Membership(org_id=org_id, user_id=user_b.id))
    db_session.commit()

    res2 = client.patch(f"/api/tasks/{task['id']}", json={"assigneeUserId": user_b.id})
    assert res2.status_code == 200
    assert res2.json()["task"]["assigneeUserId"] == user_b.id


def test_move_task(client, db_session):
    project = _project(client, _org(client))
    backlog, in_progress, _ = _board(client, project["id"])
    task = _task(client, project["id"])

    res = client.post(f"/api/tasks/{task['id']}/move", json={"toColumnId": in_progress["id"]})
    assert res.status_code == 200
    assert res.json()["task"]["columnId"] == in_progress["id"]

    entry = db_session.query(AuditLog).filter(AuditLog.action == "task.moved").one()
    assert entry.details == {"fromColumnId": backlog["id"], "toColumnId": in_progress["id"]}


def test_move_to_foreign_column_is_rejected(client):
    org_id = _org(client)
    p1 = _project(client, org_id, "One")
    p2 = _project(client, org_id, "Two")
    task = _task(client, p1["id"])
    foreign = _board(client, p2["id"])[1]

    res = client.post(f"/api/tasks/{task['id']}/move", json={"toColumnId": foreign["id"]})
    assert res.status_code == 400
    assert res.json() == {"error": "Destination column is not in this project"}


def test_delete_task_keeps_audit_trail(client, db_session):
    project = _project(client, _org(client))
    task = _task(client, project["id"])

    res = client.delete(f"/api/tasks/{task['id']}")
    assert res.status_code == 204
    assert db_session.query(Task).count() == 0

    entry = db_session.query(AuditLog).filter(AuditLog.action == "task.deleted").one()
    assert entry.details == {"taskId": task["id"], "title": "Write docs"}

    assert client.delete(f"/api/tasks/{task['id']}").status_code == 404


def test_audit_feed_newest_first(client):
    project = _project(client, _org(client))
    task = _task(client, project["id"])
    client.patch(f"/api/tasks/{task['id']}", json={"priority": "URGENT"})

    res = client.get(f"/api/projects/{project['id']}/audit")
    assert res.status_code == 200
    audit = res.json()["audit"]
    assert [a["action"] for a in audit] == ["task.updated", "task.created", "project.created"]
    assert audit[0]["actorEmail"] == "a@b.com"
    assert audit[0]["metadata"] == {"changedFields": ["priority"]}
    assert audit[0]["taskId"] == task["id"]


def test_non_member_cannot_touch_board(client, client_for, users):
    project = _project(client, _org(client))
    task = _task(client, project["id"])
    _, user_b = users

    with client_for(user_b) as c:
        for res in (
            c.get(f"/api/projects/{project['id']}/board"),
            c.get(f"/api/projects/{project['id']}/audit"),
            c.post(f"/api/projects/{project['id']}/tasks", json={"title": "x"}),
            c.patch(f"/api/tasks/{task['id']}", json={"title": "hijack"}),
            c.post(f"/api/tasks/{task['id']}/move", json={"toColumnId": task["columnId"]}),
            c.delete(f"/api/tasks/{task['id']}"),
            c.get(f"/api/orgs/{project['orgId']}/projects"),
        ):
            assert res.status_code == 403
            assert res.json() == {"error": "You are not a member of this organization"}


def test_every_priority_is_accepted_and_unknown_rejected(client):
    project = _project(client, _org(client))

    for priority in TASK_PRIORITIES:
        assert _task(client, project["id"], priority=priority)["priority"] == priority

    res = client.post(f"/api/projects/{project['id']}/tasks", json={"title": "x", "priority": "CRITICAL"})
    assert res.status_code == 400
    assert res.json()["error"] == "Invalid input"
