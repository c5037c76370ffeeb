"""User model.

Stores authentication credentials, profile info and the global role.
Flask-Login integration via UserMixin.
"""

import uuid

from flask_login import UserMixin

from sprintboard.extensions import db


class User(UserMixin, db.Model):
    __tablename__ = "users"

    # -- Valid roles (shared with ProjectMember.role) --
    ROLES = ["ADMIN", "MANAGER", "MEMBER"]

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(255))
    role = db.Column(
        db.String(20), default="MEMBER", nullable=False
    )  # ADMIN | MANAGER | MEMBER
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    # --- Relationships ---
    memberships = db.relationship(
        "ProjectMember", back_populates="user", lazy="dynamic"
    )
    comments = db.relationship(
        "Comment", back_populates="author", lazy="dynamic"
    )

    def __repr__(self):
        return f"<User {self.email}>"
