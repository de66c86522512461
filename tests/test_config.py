import os

import pytest

from authcode import ConfigurationError
from authcode.config import Settings, load_settings


def test_defaults(clean_env):
    assert load_settings(dotenv=False) == Settings()


def test_environment_overrides(clean_env):
    clean_env.setenv("AUTHCODE_DIGITS", "8")
    clean_env.setenv("AUTHCODE_PERIOD", "60")
    clean_env.setenv("AUTHCODE_WINDOW", "2")
    clean_env.setenv("AUTHCODE_ISSUER", "Acme")
    clean_env.setenv("AUTHCODE_LOG_LEVEL", "debug")
    settings = load_settings(dotenv=False)
    assert (settings.digits, settings.period, settings.window) == (8, 60, 2)
    assert settings.issuer == "Acme"
    assert settings.log_level == "DEBUG"


def test_dotenv_file_is_read(clean_env, tmp_path):
    (tmp_path / ".env").write_text("AUTHCODE_SECRET=GEZDGNBVGY3TQOJQ\n")
    try:
        assert load_settings().secret == "GEZDGNBVGY3TQOJQ"
    finally:
        os.environ.pop("AUTHCODE_SECRET", None)


@pytest.mark.parametrize("name, value", [
    ("AUTHCODE_DIGITS", "six"),
    ("AUTHCODE_DIGITS", "12"),
    ("AUTHCODE_PERIOD", "0"),
    ("AUTHCODE_WINDOW", "-1"),
    ("AUTHCODE_LOG_LEVEL", "LOUD"),
])
def test_invalid_values(clean_env, name, value):
    clean_env.setenv(name, value)
    with pytest.raises(ConfigurationError):
        load_settings(dotenv=False)
