"""Seed service: idempotent demo data.

Every row is looked up by its natural key first (user email, project
key, (user, project) membership, (project, title) column), so running
the seed again inserts nothing.
"""

import logging
from dataclasses import dataclass

from werkzeug.security import generate_password_hash

from sprintboard.extensions import atomic, db
from sprintboard.models.board import BoardColumn
from sprintboard.models.project import Project, ProjectMember
from sprintboard.models.user import User

logger = logging.getLogger(__name__)

ADMIN_EMAIL = "admin@sprintboard.local"
ADMIN_PASSWORD = "Admin@123!"
ADMIN_NAME = "Admin"
PROJECT_KEY = "SB"
PROJECT_NAME = "Sprint Board"


@dataclass
class SeedResult:
    admin: User
    project: Project
    users_created: int = 0
    projects_created: int = 0
    memberships_created: int = 0
    columns_created: int = 0

    @property
    def created_anything(self):
        return bool(
            self.users_created
            or self.projects_created
            or self.memberships_created
            or self.columns_created
        )


def seed(email=ADMIN_EMAIL, password=ADMIN_PASSWORD):
    """Insert the admin user, demo project, membership and default columns.

    Returns:
        SeedResult with the admin, the project and per-table insert counts.
    """
    with atomic():
        # --- 1. Admin user ---
        admin = User.query.filter_by(email=email).first()
        users_created = 0
        if admin is None:
            admin = User(
                email=email,
                password_hash=generate_password_hash(password),
                name=ADMIN_NAME,
                role="ADMIN",
            )
            db.session.add(admin)
            db.session.flush()
            users_created = 1

        # --- 2. Project ---
        project = Project.query.filter_by(key=PROJECT_KEY).first()
        projects_created = 0
        if project is None:
            project = Project(name=PROJECT_NAME, key=PROJECT_KEY)
            db.session.add(project)
            db.session.flush()
            projects_created = 1

        # --- 3. Membership ---
        memberships_created = 0
        membership = ProjectMember.query.filter_by(
            user_id=admin.id, project_id=project.id
        ).first()
        if membership is None:
            db.session.add(ProjectMember(
                user_id=admin.id,
                project_id=project.id,
                role="ADMIN",
            ))
            memberships_created = 1

        # --- 4. Default columns ---
        columns_created = 0
        for order, title in enumerate(Project.DEFAULT_COLUMNS):
            exists = BoardColumn.query.filter_by(
                project_id=project.id, title=title
            ).first()
            if exists is None:
                db.session.add(BoardColumn(
                    project_id=project.id, title=title, order=order
                ))
                columns_created += 1

        result = SeedResult(
            admin=admin,
            project=project,
            users_created=users_created,
            projects_created=projects_created,
            memberships_created=memberships_created,
            columns_created=columns_created,
        )

    logger.info(
        f"Seed finished: users={users_created} projects={projects_created} "
        f"memberships={memberships_created} columns={columns_created}"
    )
    return result
