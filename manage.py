"""Management script for database setup and other tasks"""

import click
from dotenv import load_dotenv
from flask.cli import FlaskGroup

load_dotenv()

from storefront import create_app  # noqa: E402
from storefront.extensions import db  # noqa: E402
from storefront.logging_config import configure_logging_for_cli  # noqa: E402
from storefront.models import PaymentMethod  # noqa: E402
from storefront.payments.methods import DEFAULT_PAYMENT_METHODS  # noqa: E402
from storefront.security import issue_access_token  # noqa: E402

cli = FlaskGroup(create_app=create_app)


@cli.command("init-db")
def init_db():
    """Create all tables (development only; use `flask db upgrade` elsewhere)"""
    db.create_all()
    click.echo("✅ Database initialized successfully!")


@cli.command("drop-db")
@click.confirmation_option(prompt="⚠️  Are you sure you want to drop all tables?")
def drop_db():
    """Drop all database tables"""
    db.drop_all()
    click.echo("✅ Database dropped successfully!")


@cli.command("seed-payment-methods")
def seed_payment_methods():
    """Insert the built-in payment methods that are not configured yet"""
    existing = {code for (code,) in db.session.query(PaymentMethod.code).all()}
    created = 0

    for position, method in enumerate(DEFAULT_PAYMENT_METHODS):
        if method["code"] in existing:
            continue
        db.session.add(PaymentMethod(
            code=method["code"],
            name=method["name"],
            enabled=method["enabled"],
            icon=method["icon"],
            description=method["description"],
            sort_order=position,
        ))
        created += 1

    db.session.commit()
    click.echo(f"✅ {created} payment method(s) seeded, {len(existing)} already present.")


@cli.command("issue-admin-token")
@click.argument("account_id")
@click.option("--role", default="admin", type=click.Choice(["admin", "super-admin"]))
def issue_admin_token(account_id, role):
    """Print a bearer token for an admin account"""
    click.echo(issue_access_token(account_id, role=role))


if __name__ == "__main__":
    configure_logging_for_cli()
    cli()
