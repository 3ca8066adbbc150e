"""
PnP Mentions Configuration
Environment-first configuration with a typed configuration object
"""
import os
import logging
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_TARGET_ACCOUNT = 'predictandpump'
DEFAULT_OUTPUT_PATH = os.path.join('output', 'mentions.json')
DEFAULT_POLL_INTERVAL_SECONDS = 15
DEFAULT_PORT = 3000

SINK_FILE = 'file'
SINK_SUPABASE = 'supabase'


class ConfigurationError(ValueError):
    """Missing or invalid configuration"""
    pass


def _flag_enabled(value: Optional[str]) -> bool:
    """A toggle is only disabled by the literal string 'false'"""
    return not (value is not None and value.strip().lower() == 'false')


def _int_env(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


@dataclass
class Config:
    """Main configuration object"""

    # Environment variables
    twitter_bearer_token: Optional[str] = field(init=False)
    target_account: str = field(init=False)
    output_path: str = field(init=False)
    cron_enabled: bool = field(init=False)
    poll_enabled: bool = field(init=False)
    poll_interval_seconds: int = field(init=False)
    max_pages: Optional[int] = field(init=False)
    sink: str = field(init=False)
    supabase_url: Optional[str] = field(init=False)
    supabase_key: Optional[str] = field(init=False)
    port: int = field(init=False)

    def __post_init__(self):
        """Load environment variables after initialization"""
        self.twitter_bearer_token = os.getenv('TWITTER_BEARER_TOKEN') or None
        self.target_account = os.getenv('TARGET_ACCOUNT') or DEFAULT_TARGET_ACCOUNT
        self.output_path = os.getenv('MENTIONS_OUTPUT_PATH') or DEFAULT_OUTPUT_PATH
        self.cron_enabled = _flag_enabled(os.getenv('MENTIONS_CRON_ENABLED'))
        self.poll_enabled = _flag_enabled(os.getenv('MENTIONS_POLL_ENABLED'))
        self.poll_interval_seconds = _int_env('MENTIONS_POLL_INTERVAL_SECONDS', DEFAULT_POLL_INTERVAL_SECONDS)
        self.max_pages = _int_env('MENTIONS_MAX_PAGES', None)
        self.sink = (os.getenv('MENTIONS_SINK') or SINK_FILE).strip().lower()
        self.supabase_url = os.getenv('SUPABASE_URL') or None
        self.supabase_key = os.getenv('SUPABASE_SERVICE_KEY') or os.getenv('SUPABASE_ANON_KEY') or None
        self.port = _int_env('PORT', DEFAULT_PORT)

        if self.sink not in (SINK_FILE, SINK_SUPABASE):
            raise ConfigurationError(f"MENTIONS_SINK must be '{SINK_FILE}' or '{SINK_SUPABASE}', got {self.sink!r}")
        if self.poll_interval_seconds <= 0:
            raise ConfigurationError("MENTIONS_POLL_INTERVAL_SECONDS must be positive")

    def validate_credentials(self):
        """Raise if the search API credential is not configured"""
        if not self.twitter_bearer_token:
            raise ConfigurationError('TWITTER_BEARER_TOKEN is missing. Add it to your environment.')

    def validate_supabase(self):
        """Raise if the store endpoint or key is not configured"""
        if not self.supabase_url or not self.supabase_key:
            raise ConfigurationError('SUPABASE_URL or SUPABASE_SERVICE_KEY/ANON_KEY missing in environment.')


# Global config instance
_config_instance: Optional[Config] = None


def load_config() -> Config:
    """
    Load configuration from the environment

    Returns:
        Typed Config object (cached for the lifetime of the process)
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    _config_instance = Config()
    logger.info(
        f"Configuration loaded: account=@{_config_instance.target_account}, "
        f"sink={_config_instance.sink}, poll={_config_instance.poll_enabled}, "
        f"cron={_config_instance.cron_enabled}"
    )
    return _config_instance


def get_config() -> Config:
    """Get the global configuration instance"""
    if _config_instance is None:
        return load_config()
    return _config_instance


def reset_config():
    """Drop the cached instance so the environment is read again"""
    global _config_instance
    _config_instance = None
