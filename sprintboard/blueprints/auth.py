"""Auth blueprint — /auth/*

Handles open registration, login, logout.
"""

from flask import (
    Blueprint,
    flash,
    redirect,
    render_template,
    request,
    url_for,
)
from flask_login import current_user

from sprintboard.errors import BadRequest, DuplicateKey, InvalidCredentials
from sprintboard.extensions import limiter
from sprintboard.services import auth_service

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


def _safe_next(next_url):
    """Only allow relative redirects (prevent open redirect)."""
    if not next_url or not next_url.startswith("/") or next_url.startswith("//"):
        return url_for("projects.index")
    return next_url


# ──────────────────────────────────────────────
# GET/POST /auth/register
# ──────────────────────────────────────────────

@auth_bp.route("/register", methods=["GET", "POST"])
@limiter.limit("10 per minute", methods=["POST"])
def register():
    """Open registration. New accounts get the Member role."""
    if current_user.is_authenticated:
        return redirect(url_for("projects.index"))

    if request.method == "POST":
        email = request.form.get("email", "")
        password = request.form.get("password", "")
        name = request.form.get("name", "")

        try:
            user = auth_service.register_user(email, password, name)
        except (BadRequest, DuplicateKey) as e:
            flash(e.message, "error")
            return render_template(
                "auth/register.html", email=email, name=name
            ), e.status_code

        auth_service.start_session(user, auth_service.session_info(user))

        flash("Welcome! Your account has been created.", "success")
        return redirect(url_for("projects.index"))

    return render_template("auth/register.html")


# ──────────────────────────────────────────────
# GET/POST /auth/login?next=/projects
# ──────────────────────────────────────────────

@auth_bp.route("/login", methods=["GET", "POST"])
@limiter.limit("15 per minute", methods=["POST"])
def login():
    """Email + password login.

    After login, redirects to the `next` query param or hidden field.
    """
    if current_user.is_authenticated:
        return redirect(_safe_next(request.args.get("next")))

    if request.method == "POST":
        email = request.form.get("email", "")
        password = request.form.get("password", "")
        remember = bool(request.form.get("remember"))
        next_url = request.form.get("next") or request.args.get("next", "")

        try:
            user, info = auth_service.authenticate(email, password)
        except InvalidCredentials as e:
            flash(e.message, "error")
            return render_template(
                "auth/login.html",
                email=email,
                next_url=next_url,
            ), e.status_code

        auth_service.start_session(user, info, remember=remember)

        flash("Logged in successfully.", "success")
        return redirect(_safe_next(next_url))

    return render_template(
        "auth/login.html",
        next_url=request.args.get("next", ""),
    )


# ──────────────────────────────────────────────
# GET /auth/logout
# ──────────────────────────────────────────────

@auth_bp.route("/logout")
def logout():
    """Log out and redirect to login page."""
    auth_service.end_session()
    flash("You have been logged out.", "info")
    return redirect(url_for("auth.login"))
