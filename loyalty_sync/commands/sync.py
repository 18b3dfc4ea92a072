"""
CLI Commands for manual loyalty resyncs.

Runs the same pipeline as the webhook for a single customer, e.g. after
fixing the HubSpot properties or when a webhook delivery was lost:

    flask loyalty sync --email jane@example.com
"""
import json
import sys

import click
from flask import current_app
from flask.cli import with_appcontext

from ..models import IdentityHint


@click.group('loyalty')
def loyalty_cli():
    """Loyalty sync commands."""
    pass


@loyalty_cli.command('sync')
@click.option('--email', help='Customer email')
@click.option('--customer-id', help='Shopify customer ID')
@click.option('--topic', default='customers/update', show_default=True,
              help='Topic recorded in the response')
@click.option('--debug', is_flag=True, help='Include raw and parsed metafield')
@with_appcontext
def sync_customer(email, customer_id, topic, debug):
    """
    Sync one customer's loyalty data to HubSpot.
    """
    if not email and not customer_id:
        raise click.UsageError('Pass --email and/or --customer-id')

    state = current_app.extensions['loyalty_sync']
    state['settings'].require()

    hint = IdentityHint.build(email=email, customer_id=customer_id)
    outcome = state['dispatcher'].sync(hint, topic, debug=debug)

    click.echo(json.dumps(outcome.body, indent=2, default=str))
    if outcome.status_code >= 400:
        sys.exit(1)


def init_app(app):
    """Register loyalty commands with Flask app."""
    app.cli.add_command(loyalty_cli)
