"""
Webhook handlers for loyalty sync.
Receives Shopify customer and order webhooks and pushes loyalty data to HubSpot.
"""
import hmac
import hashlib
import base64
import logging

logger = logging.getLogger(__name__)


def verify_shopify_webhook_signature(data: bytes, hmac_header: str, secret: str) -> bool:
    """
    Verify Shopify webhook HMAC-SHA256 signature.

    Shopify signs the raw body with the webhook secret and sends the base64
    digest in X-Shopify-Hmac-SHA256. The comparison is constant-time.

    Args:
        data: Raw request body bytes
        hmac_header: The X-Shopify-Hmac-SHA256 header value
        secret: The webhook secret

    Returns:
        True if signature is valid, False otherwise
    """
    if not secret:
        logger.warning('No webhook secret configured for verification')
        return False

    if not hmac_header:
        logger.warning('No HMAC header in webhook request')
        return False

    computed_hmac = base64.b64encode(
        hmac.new(secret.encode('utf-8'), data, hashlib.sha256).digest()
    ).decode('utf-8')

    return hmac.compare_digest(computed_hmac.encode('utf-8'), hmac_header.encode('utf-8'))


from .loyalty_hook import loyalty_hook_bp

__all__ = [
    'loyalty_hook_bp',
    'verify_shopify_webhook_signature',
]
