"""Shared pytest fixtures"""
import pytest

import config as config_module

CONFIG_ENV_KEYS = [
    'TWITTER_BEARER_TOKEN',
    'TARGET_ACCOUNT',
    'MENTIONS_OUTPUT_PATH',
    'MENTIONS_CRON_ENABLED',
    'MENTIONS_POLL_ENABLED',
    'MENTIONS_POLL_INTERVAL_SECONDS',
    'MENTIONS_MAX_PAGES',
    'MENTIONS_SINK',
    'SUPABASE_URL',
    'SUPABASE_SERVICE_KEY',
    'SUPABASE_ANON_KEY',
    'PORT',
]


@pytest.fixture
def clean_env(monkeypatch):
    """Environment with no service configuration and no cached Config"""
    for key in CONFIG_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    config_module.reset_config()
    yield monkeypatch
    config_module.reset_config()


@pytest.fixture
def make_config(clean_env, tmp_path):
    """Build a Config from keyword overrides (env var name -> value)"""
    def _make(**env):
        env.setdefault('TWITTER_BEARER_TOKEN', 'test-token')
        env.setdefault('MENTIONS_OUTPUT_PATH', str(tmp_path / 'mentions.json'))
        for key, value in env.items():
            if value is None:
                clean_env.delenv(key, raising=False)
            else:
                clean_env.setenv(key, value)
        return config_module.Config()
    return _make
