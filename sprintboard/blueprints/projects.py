"""Projects blueprint — /projects/*

Route Map:
  GET  /projects                       — Project list page (caller's memberships)
  GET  /projects/memberships           — Caller's memberships JSON
  POST /projects                       — Create project (form) → board
  GET  /projects/<id>/board            — Board page
  GET  /projects/<id>/board.json       — Board JSON
  GET  /projects/<id>/members          — Project members JSON
"""

from flask import Blueprint, jsonify, redirect, render_template, request, url_for
from flask_login import current_user, login_required

from sprintboard.permissions import can_manage_project, require_project_creator
from sprintboard.services import project_service

projects_bp = Blueprint("projects", __name__, url_prefix="/projects")


@projects_bp.route("", methods=["GET"])
@login_required
def index():
    memberships = project_service.list_memberships(current_user.id)
    return render_template(
        "projects/index.html",
        memberships=memberships,
        can_manage=can_manage_project,
    )


@projects_bp.route("/memberships")
@login_required
def memberships():
    return jsonify([
        project_service.membership_dict(m)
        for m in project_service.list_memberships(current_user.id)
    ])


@projects_bp.route("", methods=["POST"])
@login_required
def create():
    require_project_creator()
    project = project_service.create_project(
        request.form.get("name", ""),
        request.form.get("key", ""),
        current_user.id,
    )
    return redirect(url_for("projects.board", project_id=project.id))


@projects_bp.route("/<project_id>/board")
@login_required
def board(project_id):
    board = project_service.load_board(project_id)
    return render_template("projects/board.html", board=board)


@projects_bp.route("/<project_id>/board.json")
@login_required
def board_json(project_id):
    return jsonify(project_service.load_board(project_id).to_dict())


@projects_bp.route("/<project_id>/members")
@login_required
def members(project_id):
    return jsonify([
        project_service.membership_dict(m)
        for m in project_service.list_members(project_id)
    ])
