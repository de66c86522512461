"""
OTP BACKEND API ROUTES - FLASK BLUEPRINT

Tất cả endpoint nhận/trả JSON. API không lưu trạng thái: Base32 secret
được gửi kèm trong body của mỗi request.

VÍ DỤ:
curl -X POST http://localhost:5000/generate_secret -H "Content-Type: application/json" -d '{"account": "alice@example"}'
curl -X POST http://localhost:5000/totp -H "Content-Type: application/json" -d '{"secret": "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"}'
"""

import logging
import time

from flask import Blueprint, current_app, jsonify, request

from authcode import enrollment, otp_core

logger = logging.getLogger(__name__)

# Blueprint giống như một bộ router con trong Flask
otp_bp = Blueprint('otp', __name__)


def _settings():
    return current_app.config["AUTHCODE_SETTINGS"]


def _payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _missing(data: dict, *keys):
    """Trả về response 400 nếu thiếu field bắt buộc, ngược lại None."""
    missing = [k for k in keys if k not in data]
    if missing:
        return jsonify({"error": f"Missing required field(s): {', '.join(missing)}"}), 400
    return None


@otp_bp.route('/generate_secret', methods=['POST'])
def generate_secret():
    """
    TẠO SECRET KEY MỚI (không lưu lại)

      curl -X POST http://localhost:5000/generate_secret -H "Content-Type: application/json" -d '{"account": "alice@example", "issuer": "MyApp"}'

    Output: {"secret": "<base32>", "totp_uri": "...", "hotp_uri": "..."}
    """
    data = _payload()
    settings = _settings()
    digits = data.get('digits', settings.digits)
    period = data.get('period', settings.period)
    account = data.get('account', "user@example")
    issuer = data.get('issuer', settings.issuer)

    secret_b32 = enrollment.encode_secret(enrollment.generate_secret())
    totp_uri, hotp_uri = enrollment.format_otpauth_uri(
        secret_b32, account, issuer, digits=digits, period=period
    )
    logger.info("Generated secret for account=%s", account)
    return jsonify({"secret": secret_b32, "totp_uri": totp_uri, "hotp_uri": hotp_uri})


@otp_bp.route('/hotp', methods=['POST'])
def get_hotp():
    """
    LẤY MÃ HOTP (HMAC-based OTP)

    Input: {"secret": "...", "counter": 1, "digits": 6}
    """
    data = _payload()
    error = _missing(data, "secret", "counter")
    if error:
        return error

    digits = data.get('digits', _settings().digits)
    code = otp_core.hotp(enrollment.decode_secret(data["secret"]), data["counter"], digits)
    return jsonify({"code": code})


@otp_bp.route('/totp', methods=['POST'])
def get_totp():
    """
    LẤY MÃ TOTP HIỆN TẠI (Time-based OTP)

    Input: {"secret": "...", "digits": 6, "period": 30}
    Output: {"code": "...", "remaining": 12, "counter": 56666666}
    """
    data = _payload()
    error = _missing(data, "secret")
    if error:
        return error

    settings = _settings()
    digits = data.get('digits', settings.digits)
    period = data.get('period', settings.period)
    secret = enrollment.decode_secret(data["secret"])

    now = time.time()
    return jsonify({
        "code": otp_core.totp(secret, now, step=period, digits=digits),
        "remaining": otp_core.remaining_seconds(now, step=period),
        "counter": otp_core.current_counter(now, step=period),
    })


@otp_bp.route('/verify_totp', methods=['POST'])
def verify_totp_route():
    """
    XÁC MINH MÃ TOTP

    Input (JSON body):
      {
        "secret": "...",      # Base32 secret
        "code": "123456",     # Mã OTP cần xác minh
        "window": 1,          # Cho phép sai lệch 1 chu kỳ
        "digits": 6,
        "period": 30
      }

    Output: {"valid": true} hoặc {"valid": false}
    """
    data = _payload()
    error = _missing(data, "secret", "code")
    if error:
        return error

    settings = _settings()
    valid = otp_core.is_valid(
        enrollment.decode_secret(data["secret"]),
        data["code"],
        tolerance=data.get('window', settings.window),
        step=data.get('period', settings.period),
        digits=data.get('digits', settings.digits),
    )
    return jsonify({"valid": valid})


@otp_bp.route('/verify_hotp', methods=['POST'])
def verify_hotp_route():
    """
    XÁC MINH MÃ HOTP

    Input: {"secret": "...", "code": "123456", "counter": 1, "look_ahead": 1, "digits": 6}

    Output:
      {"valid": true, "new_counter": 2}  # Nếu thành công
      {"valid": false}                   # Nếu thất bại

    new_counter là counter tiếp theo client nên lưu lại.
    """
    data = _payload()
    error = _missing(data, "secret", "code", "counter")
    if error:
        return error

    valid, new_counter = otp_core.verify_hotp(
        enrollment.decode_secret(data["secret"]),
        data["code"],
        data["counter"],
        digits=data.get('digits', _settings().digits),
        look_ahead=data.get('look_ahead', 1),
    )
    if valid:
        return jsonify({"valid": valid, "new_counter": new_counter})
    return jsonify({"valid": valid})


@otp_bp.route('/otpauth_uri', methods=['POST'])
def get_otpauth_uri():
    """
    LẤY URI ĐỂ TẠO QR CODE CHO AUTHENTICATOR APPS

    Input: {"secret": "...", "account": "alice@example", "issuer": "MyApp"}
    """
    data = _payload()
    error = _missing(data, "secret", "account")
    if error:
        return error

    settings = _settings()
    # decode rồi encode lại để chuẩn hoá chữ hoa, bỏ khoảng trắng
    secret_b32 = enrollment.encode_secret(enrollment.decode_secret(data["secret"]))
    totp_uri, hotp_uri = enrollment.format_otpauth_uri(
        secret_b32,
        data["account"],
        data.get('issuer', settings.issuer),
        digits=data.get('digits', settings.digits),
        period=data.get('period', settings.period),
    )
    return jsonify({"totp_uri": totp_uri, "hotp_uri": hotp_uri})
