"""
Unit tests for the Key Provider.
"""

import logging
import os
from unittest.mock import patch

from errors.codes import ErrorCode
from session.keys import (
    INSECURE_DEFAULT_SECRET,
    SIGNING_ALGORITHM,
    derive_key,
    get_signing_key,
)


class TestDeriveKey:
    """Tests for derive_key."""
    
    def test_configured_secret_is_used(self, caplog):
        with caplog.at_level(logging.WARNING, logger="session.keys"):
            key = derive_key("super-secret")
        
        assert key.secret == b"super-secret"
        assert key.algorithm == SIGNING_ALGORITHM == "HS512"
        assert not key.insecure
        assert caplog.records == []
    
    def test_missing_secret_falls_back_and_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="session.keys"):
            key = derive_key(None)
        
        assert key.secret == INSECURE_DEFAULT_SECRET.encode()
        assert key.insecure
        
        assert len(caplog.records) == 1
        record = caplog.records[0]
        assert record.levelno == logging.WARNING
        assert record.extra_data["event"] == ErrorCode.CONFIG_WARNING.value
    
    def test_empty_secret_is_treated_as_missing(self):
        key = derive_key("")
        
        assert key.insecure
    
    def test_secret_is_not_in_repr(self):
        key = derive_key("super-secret")
        
        assert "super-secret" not in repr(key)
    
    def test_escaped_bytes_map_back_to_original_bytes(self):
        # How os.environ presents the raw bytes b"secret-\xff-bytes"
        key = derive_key("secret-\udcff-bytes")
        
        assert key.secret == b"secret-\xff-bytes"
        assert not key.insecure
    
    def test_any_lone_surrogate_still_derives_a_key(self):
        key = derive_key("\ud800")
        
        assert key.secret == b"\xed\xa0\x80"
        assert not key.insecure


class TestGetSigningKey:
    """Tests for the cached process-wide key."""
    
    def test_reads_app_key_from_environment(self):
        with patch.dict(os.environ, {"APP_KEY": "from-env"}, clear=True):
            key = get_signing_key()
        
        assert key.secret == b"from-env"
    
    def test_key_is_cached(self):
        with patch.dict(os.environ, {"APP_KEY": "from-env"}, clear=True):
            assert get_signing_key() is get_signing_key()
    
    def test_non_utf8_app_key_from_environment(self):
        with patch.dict(os.environ, {"APP_KEY": "secret-\udcff-bytes"}, clear=True):
            key = get_signing_key()
        
        assert key.secret == b"secret-\xff-bytes"
