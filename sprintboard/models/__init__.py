# Models package — import all models here so Alembic can discover them.

from sprintboard.models.user import User  # noqa: F401
from sprintboard.models.project import Project, ProjectMember  # noqa: F401
from sprintboard.models.board import BoardColumn, Task, task_assignees  # noqa: F401
from sprintboard.models.comment import Comment  # noqa: F401
