"""
Loyalty sync webhook endpoint.

Shopify is configured to deliver customers/* and orders/* webhooks here.
Every response carries a definitive status (200/400/401/500) so Shopify
never sees a hang; unhandled topics are acknowledged with 200 to avoid
retry storms.
"""
from flask import Blueprint, request, jsonify, current_app, make_response, url_for

from ..models import WebhookEvent
from ..utils.errors import ErrorCode, unauthorized, internal_error
from ..utils.exceptions import LoyaltySyncError
from . import verify_shopify_webhook_signature


loyalty_hook_bp = Blueprint('loyalty_hook', __name__)


def get_settings():
    return current_app.extensions['loyalty_sync']['settings']


def get_dispatcher():
    return current_app.extensions['loyalty_sync']['dispatcher']


def _flag(name: str) -> bool:
    return str(request.args.get(name, '')) == '1'


def liveness_response():
    """Plain-text acknowledgment for every method other than POST."""
    settings = get_settings()
    response = make_response('OK', 200)
    response.mimetype = 'text/plain'
    response.headers['X-Commit'] = settings.deploy_commit_sha
    response.headers['X-Deployment'] = settings.deploy_url
    return response


def is_hook_request() -> bool:
    """True when the current request targets the webhook path."""
    return request.script_root + request.path == url_for('loyalty_hook.handle_loyalty_webhook')


# Methods outside this list (PROPFIND and friends) fail routing with 405;
# the app's 405 handler answers those with liveness_response() as well.
@loyalty_hook_bp.route(
    '/hook',
    methods=['GET', 'HEAD', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS'],
    provide_automatic_options=False
)
def handle_loyalty_webhook():
    """
    Handle a Shopify webhook.

    Flow:
    1. Non-POST requests get a plain-text liveness acknowledgment
    2. Check configuration and verify the HMAC signature
    3. Classify the topic and run the sync pipeline

    Query params:
        debug=1: include used customer id and raw/parsed metafield
        skip_hmac=1: bypass HMAC verification (only when ALLOW_HMAC_BYPASS)
    """
    if request.method != 'POST':
        return liveness_response()

    settings = get_settings()
    topic = request.headers.get('X-Shopify-Topic', '')

    try:
        settings.require()

        raw_body = request.get_data()
        hmac_header = request.headers.get('X-Shopify-Hmac-SHA256', '')

        if _flag('skip_hmac') and settings.allow_hmac_bypass:
            current_app.logger.warning(f'Skipping HMAC verification for {topic} (skip_hmac=1)')
        elif settings.webhook_secret:
            if not verify_shopify_webhook_signature(raw_body, hmac_header, settings.webhook_secret):
                current_app.logger.warning(f'Invalid webhook signature for topic {topic}')
                return unauthorized('Invalid HMAC')
        else:
            current_app.logger.warning('SHOPIFY_WEBHOOK_SECRET not set, HMAC verification skipped')

        event = WebhookEvent(topic=topic, raw_body=raw_body, signature_header=hmac_header or None)
        outcome = get_dispatcher().dispatch(event, debug=_flag('debug'))
        return jsonify(outcome.body), outcome.status_code

    except LoyaltySyncError as e:
        current_app.logger.error(f'Error processing loyalty webhook ({topic}): {e.message}')
        return internal_error(e.message, e.code)

    except Exception as e:
        current_app.logger.exception(f'Unexpected error processing loyalty webhook ({topic})')
        return internal_error(str(e), ErrorCode.INTERNAL_ERROR)
