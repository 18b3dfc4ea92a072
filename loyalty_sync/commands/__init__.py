"""
CLI Commands for loyalty sync.

Usage:
    flask loyalty sync --email jane@example.com          # Resync one customer
    flask loyalty sync --customer-id 7890123456789 --debug
"""
from .sync import init_app as init_sync_commands


def init_app(app):
    """Register all CLI commands with the Flask app."""
    init_sync_commands(app)
