"""Project service — project creation, memberships, board loading.

create_project() writes the project, the creator's membership and the
default columns in one transaction, so a failure leaves nothing behind.
"""

import html
import logging
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import List, Optional

import bleach
from sqlalchemy.exc import IntegrityError

from sprintboard.errors import BadRequest, DuplicateKey, NotFound
from sprintboard.extensions import atomic, db
from sprintboard.models.board import BoardColumn, Task
from sprintboard.models.comment import Comment
from sprintboard.models.project import Project, ProjectMember

logger = logging.getLogger(__name__)


def sanitize(text):
    """Strip all HTML tags from user input.

    bleach escapes bare ampersands; undo that so "R&D" is stored as typed.
    Templates escape on output.
    """
    if text is None:
        return text
    if not isinstance(text, str):
        return ""
    return html.unescape(bleach.clean(text, tags=[], strip=True)).strip()


def create_project(name, key, creator_id):
    """Create a project with its creator as Admin and the default columns.

    Args:
        name: Display name (sanitized).
        key: Short unique key, stored upper-cased.
        creator_id: User UUID of the caller.

    Returns:
        The created Project.

    Raises:
        BadRequest: name or key empty after trimming, or key too long.
        DuplicateKey: key already used by another project.
    """
    name = sanitize(name)
    key = sanitize(key)
    if not name or not key:
        raise BadRequest("Project name and key are required.")
    key = key.upper()
    if len(key) > Project.MAX_KEY_LENGTH:
        raise BadRequest(
            f"Project key must be at most {Project.MAX_KEY_LENGTH} characters."
        )

    try:
        with atomic():
            project = Project(name=name, key=key)
            db.session.add(project)
            db.session.flush()  # get project.id, surfaces key collisions

            db.session.add(ProjectMember(
                user_id=creator_id,
                project_id=project.id,
                role="ADMIN",
            ))
            for order, title in enumerate(Project.DEFAULT_COLUMNS):
                db.session.add(BoardColumn(
                    project_id=project.id,
                    title=title,
                    order=order,
                ))
    except IntegrityError:
        logger.warning(f"Project key {key} already in use")
        raise DuplicateKey(f"Project key '{key}' is already in use.")

    logger.info(f"Created project {key} ({project.id}) for user {creator_id}")
    return project


def get_project(project_id):
    project = db.session.get(Project, project_id) if project_id else None
    if project is None:
        raise NotFound("Project not found.")
    return project


def list_memberships(user_id):
    """Return the user's memberships, newest project first."""
    return (
        ProjectMember.query
        .join(Project)
        .filter(ProjectMember.user_id == user_id)
        .order_by(Project.created_at.desc(), Project.name)
        .all()
    )


def list_members(project_id):
    """Return every membership of a project."""
    get_project(project_id)
    return (
        ProjectMember.query
        .filter_by(project_id=project_id)
        .order_by(ProjectMember.created_at)
        .all()
    )


def membership_dict(membership):
    """Serialize a ProjectMember to a JSON-safe dict."""
    return {
        "id": membership.id,
        "role": membership.role,
        "user": {
            "id": membership.user.id,
            "email": membership.user.email,
            "name": membership.user.name,
        },
        "project": {
            "id": membership.project.id,
            "name": membership.project.name,
            "key": membership.project.key,
        },
    }


# ─── Board view ──────────────────────────────────────────────────

@dataclass
class TaskCard:
    id: str
    title: str
    description: Optional[str]
    due_date: Optional[date]
    position: int
    comment_count: int = 0

    def to_dict(self):
        data = asdict(self)
        data["due_date"] = self.due_date.isoformat() if self.due_date else None
        return data


@dataclass
class BoardColumnView:
    id: str
    title: str
    order: int
    tasks: List[TaskCard] = field(default_factory=list)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "order": self.order,
            "tasks": [t.to_dict() for t in self.tasks],
        }


@dataclass
class Board:
    project_id: str
    name: str
    key: str
    columns: List[BoardColumnView] = field(default_factory=list)

    def to_dict(self):
        return {
            "project_id": self.project_id,
            "name": self.name,
            "key": self.key,
            "columns": [c.to_dict() for c in self.columns],
        }


def load_board(project_id):
    """Load a project's columns and tasks into a typed Board.

    Columns come back in board order; tasks within a column by position,
    then creation time.
    """
    project = get_project(project_id)

    board = Board(project_id=project.id, name=project.name, key=project.key)
    by_column = {}
    for col in project.columns.all():
        view = BoardColumnView(id=col.id, title=col.title, order=col.order)
        by_column[col.id] = view
        board.columns.append(view)

    tasks = (
        Task.query
        .filter_by(project_id=project.id)
        .order_by(Task.position, Task.created_at, Task.id)
        .all()
    )

    # One grouped query for every task on the board
    comment_counts = dict(
        db.session.query(Comment.task_id, db.func.count(Comment.id))
        .join(Task, Task.id == Comment.task_id)
        .filter(Task.project_id == project.id)
        .group_by(Comment.task_id)
        .all()
    )

    for task in tasks:
        view = by_column.get(task.column_id)
        if view is None:
            logger.warning(
                f"Task {task.id} points at column {task.column_id} outside project {project.id}"
            )
            continue
        view.tasks.append(TaskCard(
            id=task.id,
            title=task.title,
            description=task.description,
            due_date=task.due_date,
            position=task.position,
            comment_count=comment_counts.get(task.id, 0),
        ))

    return board
