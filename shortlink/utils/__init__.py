from shortlink.utils.config import app_env, app_name, project_root, app_prefix, load_config, RegistrySettings
from shortlink.utils.helpers import base_url, get_short_url, require_environment, guarantee_500_response
from shortlink.utils.shortener import generate_shortcode, random_shortcode, is_valid_shortcode
from shortlink.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'random_shortcode',
    'is_valid_shortcode',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'RegistrySettings',
    'base_url',
    'get_short_url',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
