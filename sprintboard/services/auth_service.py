"""Auth service — credential checks, session issue, open signup.

authenticate() never tells the caller whether the email or the password
was wrong: both paths raise the same InvalidCredentials.
"""

import logging
from dataclasses import dataclass

from flask import session
from flask_login import login_user, logout_user
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from sprintboard.errors import BadRequest, DuplicateKey, InvalidCredentials
from sprintboard.extensions import atomic, db
from sprintboard.models.user import User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8

# Checked against when the email is unknown so both failure paths cost a hash.
_DUMMY_PASSWORD_HASH = generate_password_hash("sprintboard-no-such-user")


@dataclass(frozen=True)
class SessionInfo:
    """What the session carries about the logged-in user."""

    user_id: str
    email: str
    role: str


def session_info(user):
    return SessionInfo(user_id=user.id, email=user.email, role=user.role)


def normalize_email(email):
    return (email or "").lower().strip()


def authenticate(email, password):
    """Check an email + password pair against the stored hash.

    Returns:
        tuple: (User, SessionInfo)

    Raises:
        InvalidCredentials: unknown email, wrong password or inactive account.
    """
    email = normalize_email(email)
    if not email or not password:
        raise InvalidCredentials()

    user = User.query.filter_by(email=email).first()
    stored_hash = user.password_hash if user is not None else _DUMMY_PASSWORD_HASH
    password_ok = check_password_hash(stored_hash, password)

    if user is None or not password_ok:
        logger.warning(f"Rejected login for {email}")
        raise InvalidCredentials()

    if not user.is_active:
        logger.warning(f"Rejected login for deactivated account {email}")
        raise InvalidCredentials()

    return user, session_info(user)


def start_session(user, info, remember=False):
    """Log the user in and keep their role in the signed session cookie."""
    login_user(user, remember=remember)
    session["email"] = info.email
    session["role"] = info.role


def end_session():
    logout_user()
    session.pop("email", None)
    session.pop("role", None)


def register_user(email, password, name, role="MEMBER"):
    """Create a new user account.

    Args:
        email: Login email (normalized to lower case).
        password: Plaintext password, at least MIN_PASSWORD_LENGTH chars.
        name: Display name.
        role: One of User.ROLES.

    Returns:
        The created User.

    Raises:
        BadRequest: missing fields, short password or unknown role.
        DuplicateKey: an account with this email already exists.
    """
    email = normalize_email(email)
    name = (name or "").strip()

    if not email or not name or not password:
        raise BadRequest("Email, name and password are required.")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise BadRequest(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
        )
    if role not in User.ROLES:
        raise BadRequest(
            f"Invalid role '{role}'. Must be one of: {', '.join(User.ROLES)}"
        )
    if User.query.filter_by(email=email).first():
        raise DuplicateKey("An account with this email already exists.")

    try:
        with atomic():
            user = User(
                email=email,
                password_hash=generate_password_hash(password),
                name=name,
                role=role,
            )
            db.session.add(user)
    except IntegrityError:
        raise DuplicateKey("An account with this email already exists.")

    logger.info(f"Registered user {email} ({role})")
    return user
