"""Shared test fixtures for the SprintBoard test suite.

Provides:
- app: Flask app configured for testing (in-memory SQLite, CSRF off)
- client: Flask test client
- db_session: clean database per test (tables created/dropped)
- seed_data: an admin, a plain member and one project with default columns
"""

import pytest
from werkzeug.security import generate_password_hash

from sprintboard import create_app
from sprintboard.extensions import db as _db
from sprintboard.models.board import BoardColumn
from sprintboard.models.user import User
from sprintboard.services import project_service


@pytest.fixture(scope="session")
def app():
    """Create the Flask application configured for testing."""
    app = create_app("testing")
    yield app


@pytest.fixture(autouse=True)
def db_session(app):
    """Create all tables before each test, drop after."""
    with app.app_context():
        _db.create_all()
        yield _db.session
        _db.session.rollback()
        _db.drop_all()


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def seed_data(app, db_session):
    """Seed an admin, a member and a project owned by the admin.

    Returns a dict of plain IDs so tests can use them across sessions.
    """
    # --- Admin user ---
    admin = User(
        email="admin@test.local",
        password_hash=generate_password_hash("adminpass123"),
        name="Admin User",
        role="ADMIN",
    )
    _db.session.add(admin)

    # --- Plain member ---
    member = User(
        email="member@test.local",
        password_hash=generate_password_hash("memberpass123"),
        name="Member User",
        role="MEMBER",
    )
    _db.session.add(member)
    _db.session.commit()

    # --- Project with default columns, admin as project Admin ---
    project = project_service.create_project("Test Project", "tp", admin.id)

    columns = (
        BoardColumn.query
        .filter_by(project_id=project.id)
        .order_by(BoardColumn.order)
        .all()
    )

    return {
        "admin_id": admin.id,
        "admin_email": "admin@test.local",
        "admin_password": "adminpass123",
        "member_id": member.id,
        "member_email": "member@test.local",
        "member_password": "memberpass123",
        "project_id": project.id,
        "project_key": project.key,
        "column_ids": [c.id for c in columns],
    }
