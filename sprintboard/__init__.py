import os
import logging

import click
from flask import Flask, jsonify, redirect, render_template, request, url_for
from flask_login import current_user

from sprintboard.config import config_by_name
from sprintboard.errors import SprintboardError
from sprintboard.extensions import db, migrate, login_manager, csrf, limiter

logger = logging.getLogger(__name__)


def create_app(config_name=None):
    """Application factory."""

    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])

    # --- Validate required env vars (skip in testing) ---
    if config_name != "testing":
        try:
            config_by_name[config_name].validate()
        except RuntimeError as e:
            app.logger.warning(f"Config validation: {e}")

    # --- Init extensions ---
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    limiter.init_app(app)

    # --- Import models so Alembic can discover them ---
    with app.app_context():
        from sprintboard import models  # noqa: F401

    if not app.config.get("ENFORCE_PROJECT_ROLES") and config_name != "testing":
        app.logger.warning(
            "ENFORCE_PROJECT_ROLES is off: any logged-in user can write to any project."
        )

    # --- Register blueprints ---
    from sprintboard.blueprints.auth import auth_bp
    from sprintboard.blueprints.projects import projects_bp
    from sprintboard.blueprints.tasks import tasks_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(projects_bp)
    app.register_blueprint(tasks_bp)

    # --- Root route ---
    @app.route("/")
    def index():
        """Root URL: project list for logged-in users, login otherwise."""
        if current_user.is_authenticated:
            return redirect(url_for("projects.index"))
        return redirect(url_for("auth.login"))

    # --- Error handlers ---
    @app.errorhandler(SprintboardError)
    def handle_app_error(e):
        if e.status_code >= 500:
            logger.error(f"{request.method} {request.path} failed: {e.message}")
        return jsonify({"error": e.message}), e.status_code

    @app.errorhandler(404)
    def not_found(e):
        return render_template("errors/404.html"), 404

    @app.errorhandler(500)
    def server_error(e):
        return render_template("errors/500.html"), 500

    # --- CLI commands ---
    register_cli(app)

    # --- Security headers ---
    @app.after_request
    def add_security_headers(response):
        """Add security headers to every response."""
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        # Prevent clickjacking
        response.headers["X-Frame-Options"] = "DENY"
        # Control referrer information
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Permissions Policy (restrict browser features)
        response.headers["Permissions-Policy"] = (
            "camera=(), microphone=(), geolocation=()"
        )
        # Content Security Policy
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "script-src 'self' 'unsafe-inline'; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:; "
            "connect-src 'self'; "
            "base-uri 'self'; "
            "form-action 'self'; "
            "frame-ancestors 'none';"
        )
        # Strict Transport Security (only in production)
        if not app.debug:
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )
        return response

    # --- Logging ---
    if not app.debug:
        logging.basicConfig(level=logging.INFO)

    return app


def register_cli(app):
    """Register custom CLI commands with the Flask app."""

    @app.cli.command("seed")
    @click.option("--email", default=None, help="Admin email")
    @click.option("--password", default=None, help="Admin password")
    def seed(email, password):
        """Create the admin user, the SB project, its membership and columns.

        Safe to run repeatedly: existing rows are left alone.

        Usage:
            flask seed
            flask seed --email admin@example.com --password s3cret
        """
        from sprintboard.services import seed_service

        result = seed_service.seed(
            email=email or seed_service.ADMIN_EMAIL,
            password=password or seed_service.ADMIN_PASSWORD,
        )

        base_url = app.config["APP_BASE_URL"]

        click.echo("")
        click.echo("=" * 60)
        if result.created_anything:
            click.echo("Seed data created successfully!")
        else:
            click.echo("Seed data already present, nothing to do.")
        click.echo("=" * 60)
        click.echo(f"  Admin:    {result.admin.email}")
        click.echo(f"  Project:  {result.project.name} [{result.project.key}] (id: {result.project.id})")
        click.echo(f"  Created:  users={result.users_created} projects={result.projects_created} "
                   f"memberships={result.memberships_created} columns={result.columns_created}")
        click.echo(f"  Board:    {base_url}/projects/{result.project.id}/board")
        click.echo("=" * 60)

    @app.cli.command("create-user")
    @click.option("--email", required=True, help="Login email")
    @click.option("--password", required=True, help="Password (min 8 chars)")
    @click.option("--name", required=True, help="Display name")
    @click.option(
        "--role",
        type=click.Choice(["ADMIN", "MANAGER", "MEMBER"], case_sensitive=False),
        default="MEMBER",
        show_default=True,
    )
    def create_user(email, password, name, role):
        """Create a user account with the given global role.

        Usage:
            flask create-user --email pm@example.com --password s3cretpass --name "PM" --role manager
        """
        from sprintboard.errors import BadRequest, DuplicateKey
        from sprintboard.services import auth_service

        try:
            user = auth_service.register_user(email, password, name, role=role.upper())
        except (BadRequest, DuplicateKey) as e:
            raise click.ClickException(e.message)

        click.echo(f"Created {user.role} user: {user.email} (id: {user.id})")
