"""Tasks blueprint — /tasks/*

The board page calls PATCH /tasks/<id> when a card is dropped on
another column.

Route Map:
  POST   /tasks                    — Create task (form) → board
  PATCH  /tasks/<id>               — Move task: {"columnId": ...}
  DELETE /tasks/<id>               — Delete task
  GET    /tasks/<id>/comments      — List comments
  POST   /tasks/<id>/comments      — Add comment: {"body": ...}
"""

from flask import Blueprint, jsonify, redirect, request, url_for
from flask_login import current_user, login_required

from sprintboard.extensions import db
from sprintboard.models.board import Task
from sprintboard.permissions import enforcement_enabled, require_project_access
from sprintboard.services import task_service

tasks_bp = Blueprint("tasks", __name__, url_prefix="/tasks")


def _json_body():
    """The request JSON object, or {} for a missing or non-object body."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@tasks_bp.route("", methods=["POST"])
@login_required
def create():
    project_id = request.form.get("projectId", "").strip()
    if project_id:
        require_project_access(project_id)
    task = task_service.create_task(
        request.form.get("title", ""),
        project_id,
        description=request.form.get("description"),
        due_date=request.form.get("dueDate"),
    )
    return redirect(url_for("projects.board", project_id=task.project_id))


@tasks_bp.route("/<task_id>", methods=["PATCH"])
@login_required
def move(task_id):
    column_id = _json_body().get("columnId")
    task = db.session.get(Task, task_id)
    if task is not None:
        require_project_access(task.project_id)
    task_service.move_task(
        task_id, column_id, same_project_only=enforcement_enabled()
    )
    return jsonify({"ok": True})


@tasks_bp.route("/<task_id>", methods=["DELETE"])
@login_required
def delete(task_id):
    task = db.session.get(Task, task_id)
    if task is not None:
        require_project_access(task.project_id)
    task_service.delete_task(task_id)
    return jsonify({"ok": True})


@tasks_bp.route("/<task_id>/comments", methods=["GET"])
@login_required
def comments(task_id):
    return jsonify([
        task_service.comment_dict(c) for c in task_service.list_comments(task_id)
    ])


@tasks_bp.route("/<task_id>/comments", methods=["POST"])
@login_required
def add_comment(task_id):
    task = task_service.get_task(task_id)
    require_project_access(task.project_id, manage=False)
    body = _json_body().get("body", "")
    comment = task_service.add_comment(task.id, current_user.id, body)
    return jsonify(task_service.comment_dict(comment)), 201
