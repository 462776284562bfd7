from lil.utils.config import Settings, CacheSettings, load_settings
from lil.utils.helpers import get_short_url, require_environment, guarantee_500_response
from lil.utils.shortener import ShortcodeGenerator, validate_target_url
from lil.utils.logging import initialize_logging
from lil.utils.runtime import app_env, running_locally


__all__ = [
    'ShortcodeGenerator',
    'validate_target_url',
    'Settings',
    'CacheSettings',
    'load_settings',
    'get_short_url',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
    'app_env',
    'running_locally',
]
