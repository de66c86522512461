"""Authenticator bất biến (immutable) gắn với một shared secret."""

import time
from dataclasses import dataclass, field
from typing import Optional, Tuple

from authcode import otp_core
from authcode.enrollment import encode_secret, format_otpauth_uri
from authcode.errors import ConfigurationError
from authcode.otp_core import Clock, Instant


@dataclass(frozen=True)
class Authenticator:
    """
    Gói secret cùng các tham số TOTP của nó.

    Mọi tham số được kiểm tra một lần khi khởi tạo; sau đó chỉ còn thời điểm
    (instant) sai mới gây lỗi. Object không bao giờ bị thay đổi, muốn đổi
    secret hay settings thì tạo object mới.

    >>> auth = Authenticator(b"12345678901234567890")
    >>> auth.code(now=59)
    '287082'
    """

    secret: bytes = field(repr=False)
    digits: int = otp_core.DEFAULT_DIGITS
    step: int = otp_core.DEFAULT_TIME_STEP
    epoch: Instant = otp_core.UNIX_EPOCH
    window: int = otp_core.DEFAULT_WINDOW
    clock: Clock = field(default=time.time, compare=False)

    def __post_init__(self):
        key = otp_core.as_key(self.secret)
        if not key:
            raise ConfigurationError("secret must not be empty")
        object.__setattr__(self, "secret", key)
        otp_core.validate_digits(self.digits)
        otp_core.validate_step(self.step)
        otp_core.validate_window(self.window)
        otp_core.to_seconds(self.epoch)

    def counter(self, now: Optional[Instant] = None) -> int:
        return otp_core.current_counter(now, epoch=self.epoch, step=self.step, clock=self.clock)

    def code_at(self, counter: int) -> str:
        return otp_core.hotp(self.secret, counter, self.digits)

    def code(self, now: Optional[Instant] = None) -> str:
        return self.code_at(self.counter(now))

    def remaining(self, now: Optional[Instant] = None) -> int:
        return otp_core.remaining_seconds(now, epoch=self.epoch, step=self.step, clock=self.clock)

    def is_valid(self, claimed_code: str, now: Optional[Instant] = None) -> bool:
        return otp_core.is_valid(
            self.secret,
            claimed_code,
            tolerance=self.window,
            now=now,
            step=self.step,
            digits=self.digits,
            epoch=self.epoch,
            clock=self.clock,
        )

    def verify_counter(self, claimed_code: str, counter: int, look_ahead: int = 1) -> Tuple[bool, int]:
        return otp_core.verify_hotp(self.secret, claimed_code, counter, self.digits, look_ahead)

    def provisioning_uri(self, account: str, issuer: Optional[str] = None) -> str:
        """URI otpauth://totp để đăng ký secret này vào authenticator app."""
        totp_uri, _ = format_otpauth_uri(
            encode_secret(self.secret), account, issuer, digits=self.digits, period=self.step
        )
        return totp_uri
