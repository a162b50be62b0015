from urlshortener.utils.config import AppSettings, app_env, app_name, app_prefix, load_config
from urlshortener.utils.helpers import base_url, get_short_url, detect_platform, guarantee_500_response
from urlshortener.utils.shortener import generate_shortcode
from urlshortener.utils.validation import validate_url
from urlshortener.utils.logging import initialize_logging


__all__ = [
    'AppSettings',
    'generate_shortcode',
    'validate_url',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'base_url',
    'get_short_url',
    'detect_platform',
    'guarantee_500_response',
    'initialize_logging',
]
