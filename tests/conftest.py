"""
Shared pytest fixtures and configuration for all tests.
"""
import os

import pytest
from hypothesis import settings, Verbosity, Phase

from config.settings import Settings, clear_settings_cache
from session.codec import SessionCodec
from session.keys import derive_key, clear_signing_key_cache
from session.storage import CookieSessionStorage

# Default profile: balanced for local development
settings.register_profile(
    "default",
    max_examples=100,
    verbosity=Verbosity.normal,
    deadline=None,
    print_blob=True,
)

# CI profile: more thorough testing for continuous integration
settings.register_profile(
    "ci",
    max_examples=200,
    verbosity=Verbosity.verbose,
    deadline=None,
    print_blob=True,
    derandomize=True,
)

# Debug profile: minimal examples for quick debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    deadline=None,
    print_blob=True,
    phases=[Phase.explicit, Phase.reuse, Phase.generate],
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "default"))


TEST_APP_KEY = "test-app-key-0123456789abcdef0123456789abcdef0123456789abcdef0123"


@pytest.fixture(autouse=True)
def _reset_caches():
    """Make every test start from freshly loaded settings and key."""
    clear_settings_cache()
    clear_signing_key_cache()
    yield
    clear_settings_cache()
    clear_signing_key_cache()


@pytest.fixture
def app_settings() -> Settings:
    """Settings with a deterministic APP_KEY."""
    return Settings(app_key=TEST_APP_KEY, _env_file=None)


@pytest.fixture
def signing_key():
    return derive_key(TEST_APP_KEY)


@pytest.fixture
def codec(signing_key) -> SessionCodec:
    return SessionCodec(signing_key)


@pytest.fixture
def storage(app_settings) -> CookieSessionStorage:
    return CookieSessionStorage.from_settings(app_settings)
