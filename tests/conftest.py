import pytest

from authcode.config import Settings
from backend import create_app

# RFC 4226 / RFC 6238 (SHA1) test secret
RFC_SECRET = b"12345678901234567890"
RFC_SECRET_B32 = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"

RFC4226_CODES = [
    "755224", "287082", "359152", "969429", "338314",
    "254676", "287922", "162583", "399871", "520489",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate AUTHCODE_* variables and any .env in the working directory."""
    for name in ("AUTHCODE_DIGITS", "AUTHCODE_PERIOD", "AUTHCODE_WINDOW",
                 "AUTHCODE_ISSUER", "AUTHCODE_LOG_LEVEL", "AUTHCODE_SECRET"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


@pytest.fixture
def client():
    app = create_app(Settings())
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c
