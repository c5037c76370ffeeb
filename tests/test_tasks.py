"""Tests for the tasks blueprint and service.

Covers:
- Task creation lands in the lowest-order column
- Empty title / missing project / unknown project / no columns
- Due date parsing
- Moving tasks (drag-and-drop endpoint): success, idempotence, validation
- Deleting tasks: repeated deletes behave the same, comments go with the task
- Comments: append, list oldest first, sanitization
"""

import pytest

from sprintboard.errors import NoColumns
from sprintboard.extensions import db
from sprintboard.models.board import BoardColumn, Task
from sprintboard.models.comment import Comment
from sprintboard.models.project import Project
from sprintboard.services import project_service, task_service


def _login(client, email, password):
    """Log in a user via the auth form."""
    return client.post("/auth/login", data={
        "email": email,
        "password": password,
    }, follow_redirects=False)


@pytest.fixture
def logged_in(client, seed_data):
    _login(client, seed_data["admin_email"], seed_data["admin_password"])
    return client


class TestCreateTask:
    """POST /tasks and task_service.create_task()."""

    def test_task_lands_in_first_column(self, logged_in, seed_data):
        resp = logged_in.post("/tasks", data={
            "title": "Write docs",
            "projectId": seed_data["project_id"],
        })
        assert resp.status_code == 302
        assert resp.headers["Location"].endswith(
            f"/projects/{seed_data['project_id']}/board"
        )

        task = Task.query.filter_by(title="Write docs").one()
        assert task.column_id == seed_data["column_ids"][0]
        assert task.project_id == seed_data["project_id"]
        assert task.position == 0
        assert task.assignees == []

    def test_lowest_order_wins_not_insertion_order(self, seed_data, db_session):
        done = db_session.get(BoardColumn, seed_data["column_ids"][3])
        done.order = -5
        db_session.commit()

        task = task_service.create_task("Already done", seed_data["project_id"])
        assert task.column_id == seed_data["column_ids"][3]

    def test_optional_fields(self, logged_in, seed_data):
        logged_in.post("/tasks", data={
            "title": "With extras",
            "projectId": seed_data["project_id"],
            "description": "<script>x</script>Some notes",
            "dueDate": "2026-12-24",
        })
        task = Task.query.filter_by(title="With extras").one()
        assert task.description == "xSome notes"
        assert task.due_date.isoformat() == "2026-12-24"

    def test_bad_due_date(self, logged_in, seed_data):
        resp = logged_in.post("/tasks", data={
            "title": "Bad date",
            "projectId": seed_data["project_id"],
            "dueDate": "next tuesday",
        })
        assert resp.status_code == 400
        assert Task.query.count() == 0

    @pytest.mark.parametrize("title", ["", "   ", "<b></b>"])
    def test_empty_title_rejected(self, logged_in, seed_data, title):
        resp = logged_in.post("/tasks", data={
            "title": title,
            "projectId": seed_data["project_id"],
        })
        assert resp.status_code == 400
        assert Task.query.count() == 0

    def test_missing_project_rejected(self, logged_in):
        resp = logged_in.post("/tasks", data={"title": "Orphan"})
        assert resp.status_code == 400
        assert Task.query.count() == 0

    def test_unknown_project(self, logged_in):
        resp = logged_in.post("/tasks", data={
            "title": "Lost",
            "projectId": "no-such-project",
        })
        assert resp.status_code == 404

    def test_project_without_columns(self, logged_in, db_session):
        bare = Project(name="Bare", key="BARE")
        db_session.add(bare)
        db_session.commit()

        resp = logged_in.post("/tasks", data={
            "title": "Nowhere to go",
            "projectId": bare.id,
        })
        assert resp.status_code == 400
        assert "no columns" in resp.get_json()["error"]
        assert Task.query.count() == 0

    def test_no_columns_service_error(self, db_session):
        bare = Project(name="Bare", key="BARE")
        db_session.add(bare)
        db_session.commit()

        with pytest.raises(NoColumns):
            task_service.create_task("Nope", bare.id)

    def test_unauthenticated_gets_401(self, client, seed_data):
        resp = client.post("/tasks", data={
            "title": "Sneaky",
            "projectId": seed_data["project_id"],
        })
        assert resp.status_code == 401
        assert Task.query.count() == 0


class TestMoveTask:
    """PATCH /tasks/<id> — the drag-and-drop endpoint."""

    def _task(self, seed_data):
        return task_service.create_task("Movable", seed_data["project_id"]).id

    def test_move_to_column(self, logged_in, seed_data, db_session):
        task_id = self._task(seed_data)
        target = seed_data["column_ids"][2]

        resp = logged_in.patch(f"/tasks/{task_id}", json={"columnId": target})

        assert resp.status_code == 200
        assert resp.get_json() == {"ok": True}
        db_session.expire_all()
        assert db_session.get(Task, task_id).column_id == target

    def test_move_is_idempotent(self, logged_in, seed_data, db_session):
        task_id = self._task(seed_data)
        target = seed_data["column_ids"][1]

        first = logged_in.patch(f"/tasks/{task_id}", json={"columnId": target})
        db_session.expire_all()
        after_first = db_session.get(Task, task_id)
        state_once = (after_first.column_id, after_first.position, after_first.title)

        second = logged_in.patch(f"/tasks/{task_id}", json={"columnId": target})
        db_session.expire_all()
        after_second = db_session.get(Task, task_id)

        assert first.get_json() == second.get_json() == {"ok": True}
        assert (after_second.column_id, after_second.position, after_second.title) == state_once
        assert Task.query.count() == 1

    def test_move_keeps_position(self, seed_data, db_session):
        task_id = self._task(seed_data)
        task = db_session.get(Task, task_id)
        task.position = 7
        db_session.commit()

        task_service.move_task(task_id, seed_data["column_ids"][3])
        db_session.expire_all()
        assert db_session.get(Task, task_id).position == 7

    @pytest.mark.parametrize("body", [{}, {"columnId": ""}, {"columnId": None}])
    def test_missing_column_id(self, logged_in, seed_data, body):
        task_id = self._task(seed_data)
        resp = logged_in.patch(f"/tasks/{task_id}", json=body)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "columnId is required."

    def test_column_from_other_project_accepted(self, logged_in, seed_data, db_session):
        task_id = self._task(seed_data)
        other = project_service.create_project("Other", "OT", seed_data["admin_id"])
        foreign_col = other.columns.first().id

        resp = logged_in.patch(f"/tasks/{task_id}", json={"columnId": foreign_col})

        assert resp.status_code == 200
        assert resp.get_json() == {"ok": True}
        db_session.expire_all()
        assert db_session.get(Task, task_id).column_id == foreign_col

    def test_unknown_column_rejected(self, logged_in, seed_data, db_session):
        task_id = self._task(seed_data)
        resp = logged_in.patch(f"/tasks/{task_id}", json={"columnId": "no-such-column"})
        assert resp.status_code == 400
        db_session.expire_all()
        assert db_session.get(Task, task_id).column_id == seed_data["column_ids"][0]

    @pytest.mark.parametrize("body", [["x"], "just a string", 42, {"columnId": ["a", "b"]}])
    def test_non_object_body_is_bad_request(self, logged_in, seed_data, body):
        task_id = self._task(seed_data)
        resp = logged_in.patch(f"/tasks/{task_id}", json=body)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "columnId is required."

    def test_unknown_task(self, logged_in, seed_data):
        resp = logged_in.patch(
            "/tasks/missing-task", json={"columnId": seed_data["column_ids"][1]}
        )
        assert resp.status_code == 404

    def test_unauthenticated_gets_401(self, client, seed_data):
        task_id = self._task(seed_data)
        resp = client.patch(
            f"/tasks/{task_id}", json={"columnId": seed_data["column_ids"][1]}
        )
        assert resp.status_code == 401


class TestDeleteTask:
    """DELETE /tasks/<id>."""

    def test_delete_twice_is_consistent(self, logged_in, seed_data):
        task_id = task_service.create_task("Doomed", seed_data["project_id"]).id

        first = logged_in.delete(f"/tasks/{task_id}")
        second = logged_in.delete(f"/tasks/{task_id}")

        assert first.status_code == second.status_code == 200
        assert first.get_json() == second.get_json() == {"ok": True}
        assert Task.query.count() == 0

    def test_delete_removes_comments(self, logged_in, seed_data):
        task_id = task_service.create_task("Chatty", seed_data["project_id"]).id
        task_service.add_comment(task_id, seed_data["admin_id"], "first!")

        logged_in.delete(f"/tasks/{task_id}")

        assert Comment.query.count() == 0

    def test_delete_service_reports_missing(self, db_session):
        assert task_service.delete_task("never-existed") is False


class TestComments:
    """GET/POST /tasks/<id>/comments."""

    def test_add_and_list_comments(self, logged_in, seed_data):
        task_id = task_service.create_task("Discuss", seed_data["project_id"]).id

        resp = logged_in.post(f"/tasks/{task_id}/comments", json={"body": "One"})
        assert resp.status_code == 201
        assert resp.get_json()["author"]["email"] == seed_data["admin_email"]
        logged_in.post(f"/tasks/{task_id}/comments", json={"body": "Two"})

        data = logged_in.get(f"/tasks/{task_id}/comments").get_json()
        assert [c["body"] for c in data] == ["One", "Two"]

    def test_comment_sanitized(self, logged_in, seed_data):
        task_id = task_service.create_task("Discuss", seed_data["project_id"]).id
        resp = logged_in.post(
            f"/tasks/{task_id}/comments",
            json={"body": "<img src=x onerror=alert(1)>hello"},
        )
        assert resp.get_json()["body"] == "hello"

    def test_empty_comment_rejected(self, logged_in, seed_data):
        task_id = task_service.create_task("Discuss", seed_data["project_id"]).id
        resp = logged_in.post(f"/tasks/{task_id}/comments", json={"body": "  "})
        assert resp.status_code == 400
        assert db.session.query(Comment).count() == 0

    @pytest.mark.parametrize("body", [["hi"], "hi", {"body": 5}])
    def test_non_object_comment_body_is_bad_request(self, logged_in, seed_data, body):
        task_id = task_service.create_task("Discuss", seed_data["project_id"]).id
        resp = logged_in.post(f"/tasks/{task_id}/comments", json=body)
        assert resp.status_code == 400
        assert Comment.query.count() == 0

    def test_ampersand_survives(self, logged_in, seed_data):
        task_id = task_service.create_task("Fish & chips", seed_data["project_id"]).id
        assert db.session.get(Task, task_id).title == "Fish & chips"
        resp = logged_in.post(f"/tasks/{task_id}/comments", json={"body": "salt & vinegar"})
        assert resp.get_json()["body"] == "salt & vinegar"

    def test_comment_on_missing_task(self, logged_in):
        resp = logged_in.post("/tasks/nope/comments", json={"body": "hi"})
        assert resp.status_code == 404
