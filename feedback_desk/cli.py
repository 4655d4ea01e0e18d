import json

import click
from flask.cli import with_appcontext

from feedback_desk.errors import AuthenticationError, PersistenceError
from feedback_desk.extensions import db
from feedback_desk.utils.helpers import service


@click.group()
def feedback():
    """Feedback store operations (read-only apart from schema creation)."""


@feedback.command("init-db")
@with_appcontext
def init_db():
    """Create the feedbacks table if it does not exist."""
    db.create_all()
    click.echo(f"Schema ready on {service('store').label}")


@feedback.command("check-db")
@with_appcontext
def check_db():
    store = service("store")
    try:
        store.ping()
        count = store.count_all()
    except PersistenceError as exc:
        raise click.ClickException(exc.message)
    click.echo(f"{store.label} OK, {count} feedback record(s)")


@feedback.command("stats")
@with_appcontext
def stats():
    """Print the same aggregate counts the admin statistics endpoint returns."""
    try:
        data = service("admin").statistics()
    except PersistenceError as exc:
        raise click.ClickException(exc.message)
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@feedback.command("token")
@click.password_option("--password", confirmation_prompt=False, help="Administrator shared secret")
@with_appcontext
def token(password):
    """Issue an admin bearer token (valid 24h) after checking the shared secret."""
    try:
        click.echo(service("auth").login(password))
    except AuthenticationError as exc:
        raise click.ClickException(exc.message)


def register_cli(app):
    app.cli.add_command(feedback)
