import click
from flask.cli import with_appcontext

from library_api.errors import LibraryError
from library_api.services.access_policy import ADMIN
from library_api.services.auth_service import AuthService


@click.command("create-admin")
@click.argument("username")
@click.argument("email")
@click.password_option()
@with_appcontext
def create_admin_command(username, email, password):
    """Create an admin account (registration only creates plain users)."""
    try:
        user = AuthService.register(username, email, password, role=ADMIN)
    except LibraryError as e:
        raise click.ClickException(e.message)
    click.echo(f"Admin '{user.username}' created (id={user.id}).")


def register_cli(app):
    app.cli.add_command(create_admin_command)
