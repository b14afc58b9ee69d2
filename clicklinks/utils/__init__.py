from clicklinks.utils.config import app_env, app_name, app_prefix, ip_salt, load_config
from clicklinks.utils.helpers import base_url, get_short_url, client_ip, header, utcnow, running_locally, require_environment, guarantee_500_response
from clicklinks.utils.shortener import generate_shortcode
from clicklinks.utils.obfuscation import obfuscate_ip, ObfuscatedIp
from clicklinks.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'obfuscate_ip',
    'ObfuscatedIp',
    'app_env',
    'app_name',
    'app_prefix',
    'ip_salt',
    'load_config',
    'base_url',
    'get_short_url',
    'client_ip',
    'header',
    'utcnow',
    'running_locally',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
