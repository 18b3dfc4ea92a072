"""
Gunicorn configuration for the loyalty sync webhook.

    gunicorn run:app
"""
import os

bind = f"0.0.0.0:{os.getenv('PORT', '8080')}"

# Each webhook is a short chain of blocking HTTP calls; threads keep
# concurrent deliveries from queueing behind one slow Shopify/HubSpot call
workers = int(os.getenv('GUNICORN_WORKERS', '2'))
worker_class = 'gthread'
threads = int(os.getenv('GUNICORN_THREADS', '4'))
timeout = 60  # Must exceed HTTP_TIMEOUT x the calls in one pipeline run
keepalive = 5

# Logging
accesslog = '-'  # stdout
errorlog = '-'   # stderr
loglevel = os.getenv('LOG_LEVEL', 'info')
capture_output = True

proc_name = 'loyalty-sync'

preload_app = True

graceful_timeout = 30


def on_starting(server):
    print("[Gunicorn] Starting loyalty sync server...")


def on_exit(server):
    print("[Gunicorn] Loyalty sync server shutting down...")
