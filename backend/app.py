"""
FLASK APP MAIN ENTRY POINT - OTP BACKEND SERVER
==================================================

File này thiết lập Flask app, cấu hình CORS, logging, error handler và
đăng ký blueprint OTP.

CÁC TÍNH NĂNG CHÍNH
- create_app(): app factory, dùng được cho test client
- CORS enabled cho frontend integration
- ConfigurationError -> HTTP 400 với JSON {"error": ...}
"""
from flask import Flask, jsonify
from flask_cors import CORS

from authcode.config import Settings, configure_logging, load_settings
from authcode.errors import ConfigurationError
from backend.routes import otp_bp


def create_app(settings: Settings = None) -> Flask:
    """
    Tạo Flask app.

    Arguments:
        settings: cấu hình; None -> đọc từ biến môi trường AUTHCODE_*
    """
    if settings is None:
        settings = load_settings()
    configure_logging(settings.log_level)

    app = Flask(__name__)
    app.config["AUTHCODE_SETTINGS"] = settings

    # Cho phép frontend (chạy trên domain/port khác) gọi API
    CORS(app)

    app.register_blueprint(otp_bp)

    @app.errorhandler(ConfigurationError)
    def handle_configuration_error(e):
        app.logger.info("Rejected request: %s", e)
        return jsonify({"error": str(e)}), 400

    @app.route('/health', methods=['GET'])
    def health():
        return jsonify({"status": "ok"})

    return app


# KHỞI CHẠY SERVER
# Chạy từ thư mục gốc của repo: python -m backend.app
# (không chạy `python backend/app.py` vì package authcode/backend phải import được)
if __name__ == '__main__':
    create_app().run(debug=True, host='0.0.0.0', port=5000)
