#!/usr/bin/env python3
"""
otp_cli.py - CLI wrapper cho authcode.otp_core

Cung cấp các subcommand:
- init        : sinh secret mới, in Base32 và otpauth URIs (không lưu file)
- hotp        : sinh mã HOTP cho một counter
- totp        : hiển thị mã TOTP hiện tại (--watch để cập nhật liên tục)
- verify      : xác minh mã TOTP với window +/- N step
- verify-hotp : xác minh mã HOTP với look-ahead
- uri         : in otpauth URIs

Secret truyền qua --secret (Base32) hoặc biến môi trường AUTHCODE_SECRET.

eg..:
    authcode init --account alice@example --issuer MyService
    authcode totp --secret GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ --watch
    authcode hotp --secret GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ --counter 1
    authcode verify --secret GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ --code 287082 --at 59
"""

import argparse
import logging
import sys
import time

from authcode import enrollment, otp_core
from authcode.config import Settings, configure_logging, load_settings
from authcode.errors import ConfigurationError

logger = logging.getLogger(__name__)


def _secret(args) -> bytes:
    text = args.secret or args.settings.secret
    if not text:
        raise ConfigurationError("no secret given: pass --secret or set AUTHCODE_SECRET")
    return enrollment.decode_secret(text)


# --- CLI command handlers ---
def cmd_init(args) -> int:
    secret = enrollment.generate_secret(args.bytes)
    secret_b32 = enrollment.encode_secret(secret)
    logger.debug("Generated %d-bit secret", len(secret) * 8)

    totp_uri, hotp_uri = enrollment.format_otpauth_uri(
        secret_b32, account=args.account, issuer=args.issuer,
        digits=args.digits, period=args.period
    )
    print("Raw shared secret (hex):")
    print(f"    {secret.hex()}")
    print("Enter this key in your authenticator app (time based):")
    print(f"    {secret_b32}")
    print("[*] otpauth URIs (import into authenticator apps):")
    print("    TOTP:", totp_uri)
    print("    HOTP:", hotp_uri)
    return 0


def cmd_hotp(args) -> int:
    code = otp_core.hotp(_secret(args), args.counter, args.digits)
    print(f"HOTP({args.digits}d, counter={args.counter}): {code}")
    return 0


def cmd_totp(args) -> int:
    secret = _secret(args)
    if not args.watch:
        now = args.at if args.at is not None else time.time()
        code = otp_core.totp(secret, now, step=args.period, digits=args.digits)
        remaining = otp_core.remaining_seconds(now, step=args.period)
        print(f"TOTP ({args.digits}d): {code}  (valid ~{remaining:2d}s)")
        return 0

    print(f"Press Ctrl+C to quit. Generating {args.digits}-digit TOTP every {args.period}s...\n")
    last_code = None
    try:
        while True:
            now = time.time()
            code = otp_core.totp(secret, now, step=args.period, digits=args.digits)
            remaining = otp_core.remaining_seconds(now, step=args.period)
            if code != last_code:
                print(f"TOTP ({args.digits}d): {code}  (valid ~{remaining:2d}s)")
                last_code = code
            else:
                print(f".. {remaining:2d}s left", end='\r', flush=True)
            time.sleep(1)
    except KeyboardInterrupt:
        print("\nBye.")
    return 0


def cmd_verify(args) -> int:
    secret = _secret(args)
    code = args.code
    if code is None:
        code = input("Enter your verification code: ").strip()

    ok = otp_core.is_valid(
        secret, code, tolerance=args.window, now=args.at,
        step=args.period, digits=args.digits
    )
    if ok:
        print("Success!")
        return 0
    print("ERROR!")
    return 1


def cmd_verify_hotp(args) -> int:
    ok, new_counter = otp_core.verify_hotp(
        _secret(args), args.code, args.counter,
        digits=args.digits, look_ahead=args.look_ahead
    )
    if ok:
        print(f"[+] HOTP code is VALID (next counter = {new_counter})")
        return 0
    print("[-] HOTP code is INVALID")
    return 1


def cmd_uri(args) -> int:
    secret_b32 = enrollment.encode_secret(_secret(args))
    totp_uri, hotp_uri = enrollment.format_otpauth_uri(
        secret_b32, args.account, args.issuer, digits=args.digits, period=args.period
    )
    print("TOTP URI:")
    print(totp_uri)
    print("\nHOTP URI:")
    print(hotp_uri)
    return 0


def cmd_help(args) -> int:
    print("'authcode -h' for help.")
    return 0


# --- Argparse builder ---
def build_parser(settings: Settings) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="authcode", description="HOTP/TOTP (HMAC-SHA1) code generator and verifier")
    p.add_argument("--verbose", action="store_true", help="Verbose (DEBUG) logging")
    sub = p.add_subparsers(dest="cmd")
    p.set_defaults(func=cmd_help)

    def secret_arg(sp):
        sp.add_argument("--secret", help="Base32 shared secret (default: $AUTHCODE_SECRET)")

    def digits_arg(sp):
        sp.add_argument("--digits", type=int, default=settings.digits, help="Number of OTP digits")

    def period_arg(sp):
        sp.add_argument("--period", type=int, default=settings.period, help="TOTP time step (seconds)")

    # init
    pi = sub.add_parser("init", help="Generate a new secret and print otpauth URIs")
    pi.add_argument("--account", default="user@example", help="Account label for otpauth URI")
    pi.add_argument("--issuer", default=settings.issuer, help="Issuer label for otpauth URI")
    pi.add_argument("--bytes", type=int, default=enrollment.SECRET_BYTES, help="Secret length in bytes")
    digits_arg(pi)
    period_arg(pi)
    pi.set_defaults(func=cmd_init)

    # hotp
    ph = sub.add_parser("hotp", help="Generate HOTP code for a specific counter")
    secret_arg(ph)
    ph.add_argument("--counter", type=int, required=True)
    digits_arg(ph)
    ph.set_defaults(func=cmd_hotp)

    # totp
    pt = sub.add_parser("totp", help="Show the current TOTP code")
    secret_arg(pt)
    digits_arg(pt)
    period_arg(pt)
    pt.add_argument("--at", type=float, help="Unix time to evaluate instead of now")
    pt.add_argument("--watch", action="store_true", help="Refresh every second until Ctrl+C")
    pt.set_defaults(func=cmd_totp)

    # verify
    pv = sub.add_parser("verify", help="Verify a TOTP code")
    secret_arg(pv)
    pv.add_argument("--code", help="OTP code to verify (prompted if omitted)")
    pv.add_argument("--window", type=int, default=settings.window, help="Allowed +/- step window")
    pv.add_argument("--at", type=float, help="Unix time to evaluate instead of now")
    digits_arg(pv)
    period_arg(pv)
    pv.set_defaults(func=cmd_verify)

    # verify-hotp
    pvh = sub.add_parser("verify-hotp", help="Verify a HOTP code")
    secret_arg(pvh)
    pvh.add_argument("--code", required=True, help="OTP code to verify")
    pvh.add_argument("--counter", type=int, required=True, help="Current HOTP counter")
    pvh.add_argument("--look-ahead", type=int, default=1, help="Allowed counter look-ahead")
    digits_arg(pvh)
    pvh.set_defaults(func=cmd_verify_hotp)

    # uri
    pu = sub.add_parser("uri", help="Print otpauth URIs for TOTP/HOTP")
    secret_arg(pu)
    pu.add_argument("--account", required=True)
    pu.add_argument("--issuer", default=settings.issuer)
    digits_arg(pu)
    period_arg(pu)
    pu.set_defaults(func=cmd_uri)

    return p


def main(argv=None) -> int:
    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(f"[!] {e}", file=sys.stderr)
        return 2

    parser = build_parser(settings)
    args = parser.parse_args(argv)
    args.settings = settings
    configure_logging("DEBUG" if args.verbose else settings.log_level)

    try:
        return args.func(args)
    except ConfigurationError as e:
        print(f"[!] {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
