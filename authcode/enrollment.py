"""
enrollment.py - Helper cho bước đăng ký authenticator app.

- Sinh secret ngẫu nhiên (chỉ trả về bytes, không lưu file).
- Mã hoá / giải mã Base32 để user nhập tay vào Google Authenticator / Authy.
- Tạo otpauth:// URI (dùng để render QR ở phía frontend).

Core (otp_core) luôn làm việc trên raw bytes; Base32 chỉ là dạng hiển thị.
"""

import base64
import os
from typing import Optional, Tuple
from urllib.parse import quote, urlencode

from authcode.errors import ConfigurationError
from authcode.otp_core import DEFAULT_DIGITS, DEFAULT_TIME_STEP, validate_digits, validate_step

SECRET_BYTES = 20           # 160-bit secret (khuyến nghị của RFC 4226)


def generate_secret(nbytes: int = SECRET_BYTES) -> bytes:
    """Sinh secret ngẫu nhiên bằng os.urandom (CSPRNG)."""
    if nbytes < 1:
        raise ConfigurationError(f"secret length must be positive, got {nbytes!r}")
    return os.urandom(nbytes)


def encode_secret(secret: bytes) -> str:
    """
    Base32-encode secret, chữ in hoa, bỏ padding '='.

    Ví dụ: encode_secret(b"12345678901234567890") -> "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
    """
    return base64.b32encode(bytes(secret)).decode("ascii").rstrip("=")


def decode_secret(secret_b32: str) -> bytes:
    """
    Giải mã Base32 secret về raw bytes.

    - Không phân biệt hoa/thường, bỏ qua khoảng trắng và dấu '-'.
    - Tự thêm padding nếu thiếu.

    Raises:
        ConfigurationError: nếu chuỗi không phải Base32 hợp lệ
    """
    if not isinstance(secret_b32, str):
        raise ConfigurationError("Base32 secret must be a string")
    cleaned = "".join(secret_b32.split()).replace("-", "").upper()
    cleaned += "=" * (-len(cleaned) % 8)
    # binascii.Error (sai alphabet/padding) là subclass của ValueError;
    # chuỗi có ký tự non-ASCII raise ValueError trực tiếp
    try:
        return base64.b32decode(cleaned, casefold=True)
    except ValueError as e:
        raise ConfigurationError("Invalid Base32 secret") from e


def _label(account: str, issuer: Optional[str]) -> str:
    if issuer:
        return quote(f"{issuer}:{account}", safe=":@")
    return quote(account, safe="@")


def format_otpauth_uri(
    secret_b32: str,
    account: str,
    issuer: Optional[str] = None,
    algo: str = "SHA1",
    digits: int = DEFAULT_DIGITS,
    period: int = DEFAULT_TIME_STEP,
    counter: int = 0,
) -> Tuple[str, str]:
    """
    Tạo otpauth:// URI cho TOTP và HOTP.

    - TOTP: otpauth://totp/{issuer}:{account}?secret=...&issuer=...&algorithm=...&digits=...&period=...
    - HOTP: otpauth://hotp/{issuer}:{account}?secret=...&issuer=...&algorithm=...&digits=...&counter=...

    Nếu không có issuer, label chỉ là account và tham số issuer bị bỏ.

    Trả về:
        (totp_uri, hotp_uri)
    """
    validate_digits(digits)
    validate_step(period)
    if not account:
        raise ConfigurationError("account label is required")

    label = _label(account, issuer)
    common = [("secret", secret_b32)]
    if issuer:
        common.append(("issuer", issuer))
    common += [("algorithm", algo), ("digits", digits)]

    totp_uri = f"otpauth://totp/{label}?" + urlencode(common + [("period", period)], quote_via=quote)
    hotp_uri = f"otpauth://hotp/{label}?" + urlencode(common + [("counter", counter)], quote_via=quote)
    return totp_uri, hotp_uri
