"""Task service — create, move, delete, comment.

Each public function runs in its own atomic() scope and commits on
success. Moving a task only rewrites its column; position is left alone.
"""

import logging
from datetime import date, datetime, timezone

from sprintboard.errors import BadRequest, NoColumns, NotFound
from sprintboard.extensions import atomic, db
from sprintboard.models.board import BoardColumn, Task
from sprintboard.models.comment import Comment
from sprintboard.services.project_service import sanitize, get_project

logger = logging.getLogger(__name__)


def _parse_due_date(value):
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise BadRequest(f"Invalid due date '{value}'. Use YYYY-MM-DD.")


def first_column(project_id):
    """The column new tasks land in: lowest order, oldest on ties."""
    return (
        BoardColumn.query
        .filter_by(project_id=project_id)
        .order_by(BoardColumn.order, BoardColumn.created_at, BoardColumn.id)
        .first()
    )


def get_task(task_id):
    task = db.session.get(Task, task_id) if task_id else None
    if task is None:
        raise NotFound("Task not found.")
    return task


def create_task(title, project_id, description=None, due_date=None):
    """Create a task in the project's first column.

    Args:
        title: Task title (sanitized, required).
        project_id: Project UUID string (required).
        description: Optional free text (sanitized).
        due_date: Optional ISO date string or date.

    Returns:
        The created Task.

    Raises:
        BadRequest: missing title/project or malformed due date.
        NotFound: project does not exist.
        NoColumns: project has no columns to put the task in.
    """
    title = sanitize(title)
    if not title or not project_id:
        raise BadRequest("Task title and project are required.")

    project = get_project(project_id)
    due = _parse_due_date(due_date)

    column = first_column(project.id)
    if column is None:
        raise NoColumns(f"Project {project.key} has no columns.")

    with atomic():
        task = Task(
            project_id=project.id,
            column_id=column.id,
            title=title,
            description=sanitize(description) or None,
            due_date=due,
            position=0,
        )
        db.session.add(task)

    logger.info(f"Created task {task.id} in {project.key}/{column.title}")
    return task


def move_task(task_id, column_id, same_project_only=False):
    """Point a task at another existing column.

    Repeating the same move leaves the same state. Columns of other
    projects are accepted unless same_project_only is set.

    Raises:
        BadRequest: column id missing or unknown, or from another project
            when same_project_only is set.
        NotFound: task does not exist.
    """
    if not column_id or not isinstance(column_id, str):
        raise BadRequest("columnId is required.")

    task = get_task(task_id)

    column = db.session.get(BoardColumn, column_id)
    if column is None:
        raise BadRequest("Target column does not exist.")
    if same_project_only and column.project_id != task.project_id:
        raise BadRequest("Target column is not part of this task's project.")

    with atomic():
        task.column_id = column.id

    logger.info(f"Moved task {task.id} to column {column.title}")
    return task


def delete_task(task_id):
    """Delete a task and its comments. Deleting a missing task is a no-op.

    Returns:
        bool: True if a row was deleted.
    """
    task = db.session.get(Task, task_id) if task_id else None
    if task is None:
        logger.warning(f"Delete requested for missing task {task_id}")
        return False

    with atomic():
        db.session.delete(task)

    logger.info(f"Deleted task {task_id}")
    return True


def add_comment(task_id, author_id, body):
    """Append a comment to a task.

    Raises:
        BadRequest: empty body.
        NotFound: task does not exist.
    """
    body = sanitize(body)
    if not body:
        raise BadRequest("Comment cannot be empty.")

    task = get_task(task_id)

    with atomic():
        comment = Comment(
            task_id=task.id,
            author_id=author_id,
            body=body,
            created_at=datetime.now(timezone.utc),
        )
        db.session.add(comment)

    return comment


def list_comments(task_id):
    return get_task(task_id).comments.all()


def comment_dict(comment):
    """Serialize a Comment to a JSON-safe dict."""
    return {
        "id": comment.id,
        "task_id": comment.task_id,
        "author": {
            "id": comment.author.id,
            "name": comment.author.name,
            "email": comment.author.email,
        },
        "body": comment.body,
        "created_at": comment.created_at.isoformat() if comment.created_at else None,
    }
