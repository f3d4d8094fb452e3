"""
Script for creating a new user, e.g. the first admin.

Uses the database configured by ``SQLALCHEMY_DATABASE_URI``.
"""

import click

from socialgraph import passwords, tokens
from socialgraph.exceptions import EmailInUse
from socialgraph.factory import create_web_app
from socialgraph.services import userstore


@click.command()
@click.option('--name', prompt='Name')
@click.option('--email', prompt='Email address')
@click.option('--password', prompt='Password', hide_input=True,
              confirmation_prompt=True)
@click.option('--admin', is_flag=True, default=False,
              help='Allow this user to use admin routes.')
def create_user(name: str, email: str, password: str, admin: bool) -> None:
    """Create a new user and print a token for them."""
    app = create_web_app(CREATE_DB=True)
    store = app.extensions[userstore.EXTENSION]
    try:
        user = store.create(
            name=name,
            email=email,
            password_hash=passwords.hash_password(
                password, app.config['PASSWORD_HASH_ITERATIONS']
            ),
            is_admin=admin
        )
    except EmailInUse as e:
        raise click.ClickException(f'{email} is already in use') from e
    finally:
        store.close()

    click.echo(f'Created user {user.id}')
    click.echo(tokens.issue(user.id, app.config['JWT_SECRET'],
                            app.config['JWT_EXPIRES']))


if __name__ == '__main__':
    create_user()
