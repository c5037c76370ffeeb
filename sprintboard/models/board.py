"""Board models.

Columns are ordered stages within a project; tasks live in exactly one
column of their project. Task.position is stored for future in-column
ordering but nothing reorders by it yet.
"""

import uuid

from sprintboard.extensions import db


task_assignees = db.Table(
    "task_assignees",
    db.Column(
        "task_id",
        db.String(36),
        db.ForeignKey("tasks.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    db.Column(
        "user_id",
        db.String(36),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class BoardColumn(db.Model):
    __tablename__ = "columns"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    project_id = db.Column(
        db.String(36), db.ForeignKey("projects.id"), nullable=False
    )
    title = db.Column(db.String(255), nullable=False)
    order = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )

    project = db.relationship("Project", back_populates="columns")
    tasks = db.relationship(
        "Task",
        back_populates="column",
        lazy="dynamic",
        order_by="[Task.position, Task.created_at, Task.id]",
    )

    __table_args__ = (
        db.Index("ix_columns_project_order", "project_id", "order"),
    )

    def __repr__(self):
        return f"<BoardColumn {self.title}>"


class Task(db.Model):
    __tablename__ = "tasks"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    project_id = db.Column(
        db.String(36), db.ForeignKey("projects.id"), nullable=False
    )
    column_id = db.Column(
        db.String(36), db.ForeignKey("columns.id"), nullable=False
    )
    title = db.Column(db.String(500), nullable=False)
    description = db.Column(db.Text, nullable=True)
    due_date = db.Column(db.Date, nullable=True)
    position = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    __table_args__ = (
        db.Index("ix_tasks_project_column", "project_id", "column_id"),
    )

    # --- Relationships ---
    project = db.relationship("Project", back_populates="tasks")
    column = db.relationship("BoardColumn", back_populates="tasks")
    assignees = db.relationship("User", secondary=task_assignees)
    comments = db.relationship(
        "Comment",
        back_populates="task",
        lazy="dynamic",
        cascade="all, delete-orphan",
        order_by="[Comment.created_at, Comment.id]",
    )

    def __repr__(self):
        return f"<Task {self.title[:40]}>"
