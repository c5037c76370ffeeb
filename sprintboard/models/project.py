"""Project models.

- Project: a named, uniquely keyed container of columns and tasks.
- ProjectMember: join table linking users to projects with a scoped role.
"""

import uuid

from sprintboard.extensions import db


class Project(db.Model):
    __tablename__ = "projects"

    DEFAULT_COLUMNS = ["Backlog", "To Do", "In Progress", "Done"]
    MAX_KEY_LENGTH = 20

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name = db.Column(db.String(255), nullable=False)
    key = db.Column(db.String(MAX_KEY_LENGTH), unique=True, nullable=False)
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )

    # --- Relationships ---
    members = db.relationship(
        "ProjectMember", back_populates="project", lazy="dynamic"
    )
    columns = db.relationship(
        "BoardColumn",
        back_populates="project",
        lazy="dynamic",
        order_by="[BoardColumn.order, BoardColumn.created_at, BoardColumn.id]",
    )
    tasks = db.relationship(
        "Task", back_populates="project", lazy="dynamic"
    )

    def __repr__(self):
        return f"<Project {self.key}>"


class ProjectMember(db.Model):
    __tablename__ = "project_members"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id = db.Column(
        db.String(36), db.ForeignKey("users.id"), nullable=False
    )
    project_id = db.Column(
        db.String(36), db.ForeignKey("projects.id"), nullable=False
    )
    role = db.Column(
        db.String(20), default="MEMBER", nullable=False
    )  # ADMIN | MANAGER | MEMBER
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )

    __table_args__ = (
        db.UniqueConstraint(
            "user_id", "project_id", name="uq_project_member"
        ),
    )

    # --- Relationships ---
    user = db.relationship("User", back_populates="memberships")
    project = db.relationship("Project", back_populates="members")

    def __repr__(self):
        return f"<ProjectMember user={self.user_id} project={self.project_id}>"
