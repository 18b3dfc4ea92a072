"""
Configuration management for the loyalty sync service.

Environment variables are read here and nowhere else. `create_app` turns the
selected Flask config into a `SyncSettings` value that is passed to every
component of the pipeline.
"""
import os
from dataclasses import dataclass
from dotenv import load_dotenv

from .utils.exceptions import ConfigurationError

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _clean_domain(domain: str) -> str:
    return domain.replace('https://', '').replace('http://', '').rstrip('/')


DUPLICATE_POLICIES = ('update_all', 'update_newest')


class BaseConfig:
    """Base configuration."""
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')

    # Shopify (source system)
    SHOPIFY_STORE = _clean_domain(os.getenv('SHOPIFY_STORE', ''))
    SHOPIFY_TOKEN = os.getenv('SHOPIFY_TOKEN', '')
    SHOPIFY_API_VERSION = os.getenv('SHOPIFY_API_VERSION', '2024-07')
    SHOPIFY_WEBHOOK_SECRET = os.getenv('SHOPIFY_WEBHOOK_SECRET', '')

    # Appstle stores its loyalty record as a single JSON metafield
    LOYALTY_METAFIELD_NAMESPACE = os.getenv('LOYALTY_METAFIELD_NAMESPACE', 'appstle_loyalty')
    LOYALTY_METAFIELD_KEY = os.getenv('LOYALTY_METAFIELD_KEY', 'customer_loyalty')

    # HubSpot (CRM)
    HUBSPOT_TOKEN = os.getenv('HUBSPOT_TOKEN', '')
    HUBSPOT_BASE_URL = os.getenv('HUBSPOT_BASE_URL', 'https://api.hubapi.com')
    HUBSPOT_SEARCH_LIMIT = int(os.getenv('HUBSPOT_SEARCH_LIMIT', '20'))
    CRM_DUPLICATE_POLICY = os.getenv('CRM_DUPLICATE_POLICY', 'update_all')

    HTTP_TIMEOUT = float(os.getenv('HTTP_TIMEOUT', '15'))

    # ?skip_hmac=1 is only honoured when this is on
    ALLOW_HMAC_BYPASS = _env_flag('ALLOW_HMAC_BYPASS', True)

    # Echoed on the GET liveness response
    DEPLOY_COMMIT_SHA = os.getenv('DEPLOY_COMMIT_SHA', 'local')
    DEPLOY_URL = os.getenv('DEPLOY_URL', '')


class DevelopmentConfig(BaseConfig):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(BaseConfig):
    """Production configuration."""
    DEBUG = False
    ALLOW_HMAC_BYPASS = _env_flag('ALLOW_HMAC_BYPASS', False)


class TestingConfig(BaseConfig):
    """Testing configuration."""
    TESTING = True
    SHOPIFY_STORE = 'test-shop.myshopify.com'
    SHOPIFY_TOKEN = 'shpat_test_token'
    SHOPIFY_WEBHOOK_SECRET = 'test_webhook_secret'
    HUBSPOT_TOKEN = 'pat-test-token'
    HUBSPOT_BASE_URL = 'https://api.hubapi.com'
    CRM_DUPLICATE_POLICY = 'update_all'
    ALLOW_HMAC_BYPASS = True
    DEPLOY_COMMIT_SHA = 'testsha'
    DEPLOY_URL = 'loyalty-sync.test'


config_map = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig
}


def get_config(config_name: str = 'development'):
    """Get configuration class by name."""
    return config_map.get(config_name, DevelopmentConfig)


@dataclass(frozen=True)
class SyncSettings:
    """Immutable settings shared by the pipeline components."""

    shopify_store: str
    shopify_token: str
    hubspot_token: str
    webhook_secret: str = ''
    shopify_api_version: str = '2024-07'
    metafield_namespace: str = 'appstle_loyalty'
    metafield_key: str = 'customer_loyalty'
    hubspot_base_url: str = 'https://api.hubapi.com'
    hubspot_search_limit: int = 20
    duplicate_policy: str = 'update_all'
    http_timeout: float = 15.0
    allow_hmac_bypass: bool = False
    deploy_commit_sha: str = 'local'
    deploy_url: str = ''

    @classmethod
    def from_mapping(cls, config) -> 'SyncSettings':
        """Build settings from a Flask config (or any mapping)."""
        return cls(
            shopify_store=_clean_domain(config.get('SHOPIFY_STORE', '') or ''),
            shopify_token=config.get('SHOPIFY_TOKEN', '') or '',
            hubspot_token=config.get('HUBSPOT_TOKEN', '') or '',
            webhook_secret=config.get('SHOPIFY_WEBHOOK_SECRET', '') or '',
            shopify_api_version=config.get('SHOPIFY_API_VERSION', '2024-07'),
            metafield_namespace=config.get('LOYALTY_METAFIELD_NAMESPACE', 'appstle_loyalty'),
            metafield_key=config.get('LOYALTY_METAFIELD_KEY', 'customer_loyalty'),
            hubspot_base_url=(config.get('HUBSPOT_BASE_URL') or 'https://api.hubapi.com').rstrip('/'),
            hubspot_search_limit=int(config.get('HUBSPOT_SEARCH_LIMIT', 20)),
            duplicate_policy=config.get('CRM_DUPLICATE_POLICY', 'update_all'),
            http_timeout=float(config.get('HTTP_TIMEOUT', 15)),
            allow_hmac_bypass=bool(config.get('ALLOW_HMAC_BYPASS', False)),
            deploy_commit_sha=config.get('DEPLOY_COMMIT_SHA', 'local'),
            deploy_url=config.get('DEPLOY_URL', ''),
        )

    def require(self) -> None:
        """
        Check that everything the pipeline needs is configured.

        Raises:
            ConfigurationError: Naming the first missing setting
        """
        required = [
            ('SHOPIFY_STORE', self.shopify_store),
            ('SHOPIFY_TOKEN', self.shopify_token),
            ('HUBSPOT_TOKEN', self.hubspot_token),
        ]
        if not self.allow_hmac_bypass:
            required.append(('SHOPIFY_WEBHOOK_SECRET', self.webhook_secret))

        for name, value in required:
            if not value:
                raise ConfigurationError(f"Missing env var: {name}")

        if self.duplicate_policy not in DUPLICATE_POLICIES:
            raise ConfigurationError(
                f"CRM_DUPLICATE_POLICY must be one of {', '.join(DUPLICATE_POLICIES)}, "
                f"got '{self.duplicate_policy}'"
            )


def validate_config(config_name: str = 'development') -> None:
    """
    Validate configuration before app startup.

    In production, missing credentials stop the app from booting instead of
    failing every webhook with a 500.

    Raises:
        ConfigurationError: If validation fails in production
    """
    if config_name == 'production':
        config = get_config(config_name)
        settings = SyncSettings.from_mapping(
            {k: getattr(config, k) for k in dir(config) if k.isupper()}
        )
        settings.require()
