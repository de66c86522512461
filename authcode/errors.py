"""Exception dùng chung cho package authcode."""


class ConfigurationError(ValueError):
    """Tham số không hợp lệ truyền vào các hàm OTP.

    Được raise ngay tại chỗ phát hiện input sai (số chữ số, time step,
    window, counter ngoài phạm vi, thời điểm trước epoch, Base32 sai định dạng).
    Giá trị không bao giờ bị âm thầm clamp.
    """
