"""Tests for JSONBin configuration checks."""
import pytest

from vinlylog.config import require_jsonbin_config
from vinlylog.core.errors import ConfigMissing


def test_returns_stripped_values() -> None:
    assert require_jsonbin_config(" bin ", " key ") == ("bin", "key")


def test_names_missing_variables() -> None:
    with pytest.raises(ConfigMissing) as exc:
        require_jsonbin_config("", "")
    assert "JSONBIN_BIN_ID" in str(exc.value)
    assert "JSONBIN_MASTER_KEY" in str(exc.value)
