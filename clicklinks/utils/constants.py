import string


# Shortcode generation
SHORTCODE_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits  # 62 symbols
SHORTCODE_LENGTH = 7
SHORTCODE_PATTERN = r'^[A-Za-z0-9_-]{3,32}$'  # custom (requested) shortcodes

# Allocation retries before giving up on generated shortcodes
MAX_ALLOCATION_ATTEMPTS = 5

# Default short link TTL in minutes
DEFAULT_VALIDITY_MINUTES = 30

# Placeholders stored when an origin address can't be obfuscated
UNKNOWN_IP_HASH = 'na'
UNKNOWN_IP_PREFIX = 'unknown'

# Environment variables
APP_ENV_ENV = 'APP_ENV'
APP_NAME_ENV = 'APP_NAME'
AWS_SAM_LOCAL_ENV = 'AWS_SAM_LOCAL'
LOG_LEVEL_ENV = 'LOG_LEVEL'
IP_SALT_ENV = 'IP_SALT'  # noqa: S105

# AppConfig: identifiers of the deployed backend configuration
APPCONFIG_APP_ID_ENV = 'APPCONFIG_APP_ID'
APPCONFIG_ENV_ID_ENV = 'APPCONFIG_ENV_ID'
APPCONFIG_PROFILE_ID_ENV = 'APPCONFIG_PROFILE_ID'
APPCONFIG_AGENT_URL_ENV = 'APPCONFIG_AGENT_URL'
APPCONFIG_PROFILE_NAME_ENV = 'APPCONFIG_PROFILE_NAME'

# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
