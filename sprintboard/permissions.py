"""
Role checks for project access.

- can_manage_project: pure predicate on a role value.
- require_project_creator / require_project_access: the checks the write
  handlers run. Both are no-ops unless ENFORCE_PROJECT_ROLES is on, which
  keeps the open behaviour where any logged-in user may write anywhere.
"""

from flask import current_app, session
from flask_login import current_user

from sprintboard.errors import Forbidden

MANAGING_ROLES = ("ADMIN", "MANAGER")


def can_manage_project(role):
    """True iff the role is Admin or Manager. Unknown or missing roles are False."""
    if not isinstance(role, str):
        return False
    return role.upper() in MANAGING_ROLES


def enforcement_enabled():
    return bool(current_app.config.get("ENFORCE_PROJECT_ROLES"))


def require_project_creator():
    """Check the session role before a project is created."""
    if not enforcement_enabled():
        return
    # Role is stored in the session at login, no lookup needed.
    if not can_manage_project(session.get("role")):
        raise Forbidden("Only admins and managers can create projects.")


def require_project_access(project_id, manage=True):
    """Check the caller's membership in a project.

    Args:
        project_id: Project UUID string.
        manage: If True the membership role must also pass
            can_manage_project; otherwise membership alone is enough.
    """
    if not enforcement_enabled():
        return

    from sprintboard.models.project import ProjectMember

    membership = ProjectMember.query.filter_by(
        user_id=current_user.id,
        project_id=project_id,
    ).first()

    if membership is None:
        raise Forbidden("You are not a member of this project.")
    if manage and not can_manage_project(membership.role):
        raise Forbidden()
