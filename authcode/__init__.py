"""
authcode package
================

Tạo và xác minh mã OTP (HOTP/TOTP) theo chuẩn RFC 4226 & RFC 6238,
tương thích Google Authenticator / Authy.

──────────────────────────────────────────────
Giải thuật cốt lõi
──────────────────────────────────────────────
- HOTP (HMAC-based One-Time Password):
  code = Truncate(HMAC-SHA1(key=secret, msg=counter)) mod 10^digits

- TOTP (Time-based One-Time Password):
  HOTP với counter = floor((timestamp - T0) / timestep)
  → Mặc định timestep = 30 giây, 6 chữ số.

- Window validation:
  Thử counter hiện tại, rồi +1, -1, +2, -2, ... để bù lệch đồng hồ.

Các hàm core là hàm thuần: secret (raw bytes) được truyền vào mỗi lần gọi,
package không lưu secret và không chặn mã đã dùng (replay) - đó là việc
của tầng lưu trữ.

──────────────────────────────────────────────
Ví dụ sử dụng nhanh
──────────────────────────────────────────────
>>> from authcode import generate_secret, encode_secret, totp, is_valid
>>> secret = generate_secret()
>>> key_for_app = encode_secret(secret)   # nhập key này vào authenticator app
>>> code = totp(secret)
>>> is_valid(secret, code)
True
"""
from authcode.authenticator import Authenticator
from authcode.enrollment import (
    decode_secret,
    encode_secret,
    format_otpauth_uri,
    generate_secret,
)
from authcode.errors import ConfigurationError
from authcode.otp_core import (
    DEFAULT_DIGITS,
    DEFAULT_TIME_STEP,
    DEFAULT_WINDOW,
    current_counter,
    generate_password,
    hotp,
    is_valid,
    remaining_seconds,
    time_based_password,
    totp,
    verify_hotp,
)

__all__ = [
    "Authenticator",
    "ConfigurationError",
    "DEFAULT_DIGITS",
    "DEFAULT_TIME_STEP",
    "DEFAULT_WINDOW",
    "current_counter",
    "decode_secret",
    "encode_secret",
    "format_otpauth_uri",
    "generate_password",
    "generate_secret",
    "hotp",
    "is_valid",
    "remaining_seconds",
    "time_based_password",
    "totp",
    "verify_hotp",
]
