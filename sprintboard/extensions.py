"""
Deferred extension instances.

Created here, bound to the app in create_app() via init_app().
"""

from contextlib import contextmanager

from flask import jsonify, redirect, request, url_for
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
csrf = CSRFProtect()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],  # No global limit — we apply per-route
    storage_uri="memory://",
)

# Flask-Login config
login_manager.login_view = "auth.login"
login_manager.login_message = "Please log in to access this page."
login_manager.login_message_category = "info"


@login_manager.user_loader
def load_user(user_id):
    """Load user by ID from session. Imports lazily to avoid circular deps."""
    from sprintboard.models.user import User

    return db.session.get(User, user_id)


@login_manager.unauthorized_handler
def unauthorized():
    """Reads go to the login form; writes get a 401."""
    if request.method == "GET":
        return redirect(url_for(login_manager.login_view, next=request.path))
    from sprintboard.errors import Unauthenticated

    error = Unauthenticated()
    return jsonify({"error": error.message}), error.status_code


@contextmanager
def atomic():
    """Run a group of writes as one unit: commit on success, roll back on error."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
