#!/usr/bin/env python3
"""
otp_core.py - Core library cho HOTP / TOTP và window validation.

Mục tiêu:
- Chỉ chứa các hàm thuần (pure functions), không I/O, không lưu trạng thái.
- Secret luôn là raw bytes do caller truyền vào mỗi lần gọi; module này không
  sinh, không cache và không lưu secret.
- Đồng hồ (clock) có thể inject để test với thời điểm cố định.

Thuật toán:
- HOTP (RFC 4226): code = Truncate(HMAC-SHA1(secret, counter)) mod 10^digits
- TOTP (RFC 6238): HOTP với counter = floor((now - epoch) / step)
- Window validation: thử counter hiện tại, rồi +1, -1, +2, -2, ... tới tolerance.
"""

import hashlib
import hmac
import logging
import math
import struct
import time
from datetime import datetime, timezone
from numbers import Real
from typing import Callable, Optional, Tuple, Union

from authcode.errors import ConfigurationError

logger = logging.getLogger(__name__)

# --- Config / constants ----------------------------------------------------
DEFAULT_DIGITS = 6          # chuẩn: 6 chữ số
DEFAULT_TIME_STEP = 30      # TOTP step (giây)
DEFAULT_WINDOW = 1          # chấp nhận lệch +/- 1 step
MIN_DIGITS = 1
MAX_DIGITS = 9              # 10^9 vẫn lớn hơn giá trị 31-bit sau truncation
UNIX_EPOCH = 0
MAX_COUNTER = 2 ** 64 - 1

Instant = Union[int, float, datetime]
Clock = Callable[[], float]


# --- Argument checks -------------------------------------------------------
def as_key(secret) -> bytes:
    """Trả về secret dạng bytes, không chuẩn hoá gì thêm."""
    if isinstance(secret, str):
        raise TypeError("secret must be raw bytes; encode or Base32-decode it first")
    if not isinstance(secret, (bytes, bytearray, memoryview)):
        raise TypeError(f"secret must be bytes, not {type(secret).__name__}")
    return bytes(secret)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_digits(digits: int) -> int:
    """Kiểm tra số chữ số OTP nằm trong [MIN_DIGITS, MAX_DIGITS]."""
    if not _is_int(digits) or not MIN_DIGITS <= digits <= MAX_DIGITS:
        raise ConfigurationError(
            f"digits must be an integer between {MIN_DIGITS} and {MAX_DIGITS}, got {digits!r}"
        )
    return digits


def validate_step(step: int) -> int:
    if not _is_int(step) or step <= 0:
        raise ConfigurationError(f"time step must be a positive integer, got {step!r}")
    return step


def validate_window(window: int) -> int:
    if not _is_int(window) or window < 0:
        raise ConfigurationError(f"window must be a non-negative integer, got {window!r}")
    return window


def _validate_counter(counter: int) -> int:
    if not _is_int(counter) or not 0 <= counter <= MAX_COUNTER:
        raise ConfigurationError(f"counter must be in [0, 2**64 - 1], got {counter!r}")
    return counter


def to_seconds(instant: Instant) -> float:
    """
    Chuyển một thời điểm sang số giây Unix.

    - int/float: coi như epoch seconds (NaN / inf không hợp lệ).
    - datetime: naive datetime được hiểu là UTC.

    Raises:
        ConfigurationError: nếu thời điểm là NaN hoặc vô cực
    """
    if isinstance(instant, datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        return instant.timestamp()
    if isinstance(instant, Real) and not isinstance(instant, bool):
        if not math.isfinite(instant):
            raise ConfigurationError(f"instant must be a finite number, got {instant!r}")
        return instant
    raise TypeError(f"instant must be a number or datetime, not {type(instant).__name__}")


# --- RFC helpers -----------------------------------------------------------
def int_to_bytes(i: int) -> bytes:
    """
    Chuyển counter sang 8-byte big-endian như RFC4226 yêu cầu.

    Ví dụ: int_to_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'
    """
    return struct.pack(">Q", i)


def dynamic_truncate(hmac_digest: bytes) -> int:
    """
    Áp dụng dynamic truncation theo RFC4226.

    - offset = last_byte & 0x0F (luôn trong 0..15, nên offset + 4 <= 20)
    - Lấy 4 bytes từ offset, clear MSB (0x7F) cho byte đầu
    - Trả về integer 31-bit (không âm)
    """
    offset = hmac_digest[-1] & 0x0F
    code = (
        ((hmac_digest[offset] & 0x7F) << 24)
        | ((hmac_digest[offset + 1] & 0xFF) << 16)
        | ((hmac_digest[offset + 2] & 0xFF) << 8)
        | (hmac_digest[offset + 3] & 0xFF)
    )
    return code


# --- Code Generator (HOTP) -------------------------------------------------
def hotp(secret: bytes, counter: int, digits: int = DEFAULT_DIGITS) -> str:
    """
    Sinh mã HOTP theo RFC4226.

    Steps:
    1. Message = 8-byte counter (big-endian)
    2. HMAC-SHA1(key=secret, message)
    3. Dynamic truncate -> dbc
    4. otp = dbc % 10^digits
    5. Zero-pad để có đúng "digits" chữ số

    Arguments:
        secret: raw key bytes (rỗng hoặc rất dài đều hợp lệ với HMAC)
        counter: integer counter trong [0, 2**64 - 1]
        digits: số chữ số OTP (1..9, mặc định 6)

    Raises:
        ConfigurationError: digits hoặc counter ngoài phạm vi
        TypeError: secret không phải bytes
    """
    key = as_key(secret)
    validate_digits(digits)
    _validate_counter(counter)

    digest = hmac.new(key, int_to_bytes(counter), hashlib.sha1).digest()
    dbc = dynamic_truncate(digest)
    return str(dbc % (10 ** digits)).zfill(digits)


generate_password = hotp


# --- Time-Step Adapter (TOTP) ----------------------------------------------
def _elapsed(now: Optional[Instant], epoch: Instant, clock: Clock) -> float:
    if now is None:
        now = clock()
    elapsed = to_seconds(now) - to_seconds(epoch)
    if elapsed < 0:
        raise ConfigurationError(f"instant {now!r} is before the epoch {epoch!r}")
    return elapsed


def current_counter(
    now: Optional[Instant] = None,
    epoch: Instant = UNIX_EPOCH,
    step: int = DEFAULT_TIME_STEP,
    clock: Clock = time.time,
) -> int:
    """
    Tính counter TOTP = floor((now - epoch) / step).

    Arguments:
        now: thời điểm cần tính (None -> gọi clock())
        epoch: mốc T0, mặc định Unix epoch
        step: X (giây), mặc định 30
        clock: hàm trả về epoch seconds hiện tại, inject được khi test

    Raises:
        ConfigurationError: step <= 0 hoặc now trước epoch
    """
    validate_step(step)
    return int(_elapsed(now, epoch, clock) // step)


def remaining_seconds(
    now: Optional[Instant] = None,
    epoch: Instant = UNIX_EPOCH,
    step: int = DEFAULT_TIME_STEP,
    clock: Clock = time.time,
) -> int:
    """Số giây còn lại trước khi mã TOTP hiện tại hết hạn (1..step)."""
    validate_step(step)
    return int(step - (_elapsed(now, epoch, clock) % step))


def totp(
    secret: bytes,
    now: Optional[Instant] = None,
    step: int = DEFAULT_TIME_STEP,
    digits: int = DEFAULT_DIGITS,
    epoch: Instant = UNIX_EPOCH,
    clock: Clock = time.time,
) -> str:
    """Sinh mã TOTP theo RFC6238: hotp(secret, current_counter(now), digits)."""
    counter = current_counter(now, epoch=epoch, step=step, clock=clock)
    logger.debug("TOTP: counter=%d step=%d", counter, step)
    return hotp(secret, counter, digits)


time_based_password = totp


# --- Window Validator ------------------------------------------------------
def _is_well_formed(code, digits: int) -> bool:
    return isinstance(code, str) and len(code) == digits and code.isascii() and code.isdigit()


def _comparable(code, digits: int) -> Tuple[bool, str]:
    """
    Trả về (well_formed, chuỗi dùng để so sánh).

    Mã sai định dạng được thay bằng chuỗi không phải chữ số (không bao giờ
    khớp), để vòng so sánh vẫn chạy đủ số HMAC như một mã sai thông thường.
    """
    if _is_well_formed(code, digits):
        return True, code
    return False, "-" * digits


def _matches(key: bytes, code: str, counter: int, digits: int) -> bool:
    return hmac.compare_digest(hotp(key, counter, digits), code)


def is_valid(
    secret: bytes,
    claimed_code: str,
    tolerance: int = DEFAULT_WINDOW,
    now: Optional[Instant] = None,
    step: int = DEFAULT_TIME_STEP,
    digits: int = DEFAULT_DIGITS,
    epoch: Instant = UNIX_EPOCH,
    clock: Clock = time.time,
) -> bool:
    """
    Xác minh mã TOTP do user nhập, chấp nhận lệch đồng hồ +/- tolerance step.

    Thứ tự kiểm tra: counter hiện tại, rồi current+1, current-1, current+2,
    current-2, ... Counter âm (current - i < 0) bị bỏ qua.

    Mã sai định dạng (không phải chuỗi đúng `digits` chữ số) trả về False
    sau cùng số lần HMAC như mã không khớp. Lỗi cấu hình (digits, step,
    tolerance, now trước epoch) được raise ConfigurationError trước khi so sánh.
    """
    key = as_key(secret)
    validate_digits(digits)
    validate_window(tolerance)
    current = current_counter(now, epoch=epoch, step=step, clock=clock)
    well_formed, code = _comparable(claimed_code, digits)

    if _matches(key, code, current, digits):
        return well_formed

    for i in range(1, tolerance + 1):
        if current + i <= MAX_COUNTER and _matches(key, code, current + i, digits):
            logger.debug("Accepted code at counter=%d (drift +%d)", current + i, i)
            return well_formed
        if current - i >= 0 and _matches(key, code, current - i, digits):
            logger.debug("Accepted code at counter=%d (drift -%d)", current - i, i)
            return well_formed

    logger.debug("No match within %d step(s) of counter=%d", tolerance, current)
    return False


def verify_hotp(
    secret: bytes,
    claimed_code: str,
    counter: int,
    digits: int = DEFAULT_DIGITS,
    look_ahead: int = DEFAULT_WINDOW,
) -> Tuple[bool, int]:
    """
    Xác minh mã HOTP với look-ahead (counter .. counter + look_ahead).

    Trả về:
        (True, matched_counter + 1) nếu khớp, ngược lại (False, counter).
        Caller tự lưu counter tiếp theo; module này không chặn reuse.
    """
    key = as_key(secret)
    validate_digits(digits)
    validate_window(look_ahead)
    _validate_counter(counter)
    well_formed, code = _comparable(claimed_code, digits)

    for i in range(look_ahead + 1):
        candidate = counter + i
        if candidate > MAX_COUNTER:
            break
        if _matches(key, code, candidate, digits) and well_formed:
            return True, candidate + 1
    return False, counter
