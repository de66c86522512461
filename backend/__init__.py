"""
Backend package: Flask JSON API trên nền authcode.otp_core.

API không lưu secret; client gửi Base32 secret trong mỗi request.
"""

from .app import create_app

__all__ = ['create_app']
