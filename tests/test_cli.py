import pytest

from authcode.enrollment import decode_secret
from authcode.otp_cli import main

from conftest import RFC_SECRET_B32


@pytest.fixture(autouse=True)
def _env(clean_env):
    return clean_env


def test_no_command_prints_hint(capsys):
    assert main([]) == 0
    assert "-h" in capsys.readouterr().out


def test_hotp(capsys):
    assert main(["hotp", "--secret", RFC_SECRET_B32, "--counter", "1"]) == 0
    assert "287082" in capsys.readouterr().out


def test_hotp_eight_digits(capsys):
    assert main(["hotp", "--secret", RFC_SECRET_B32, "--counter", "1", "--digits", "8"]) == 0
    assert "94287082" in capsys.readouterr().out


def test_totp_at_fixed_time(capsys):
    assert main(["totp", "--secret", RFC_SECRET_B32, "--at", "1111111109"]) == 0
    out = capsys.readouterr().out
    assert "081804" in out
    assert "valid ~ 1s" in out


def test_secret_from_environment(_env, capsys):
    _env.setenv("AUTHCODE_SECRET", RFC_SECRET_B32)
    assert main(["totp", "--at", "59"]) == 0
    assert "287082" in capsys.readouterr().out


def test_missing_secret(capsys):
    assert main(["totp"]) == 2
    assert "no secret" in capsys.readouterr().err


def test_invalid_secret(capsys):
    assert main(["hotp", "--secret", "not base32!", "--counter", "0"]) == 2
    assert "Invalid Base32" in capsys.readouterr().err


def test_invalid_digits(capsys):
    assert main(["hotp", "--secret", RFC_SECRET_B32, "--counter", "0", "--digits", "12"]) == 2


def test_verify_success(capsys):
    assert main(["verify", "--secret", RFC_SECRET_B32, "--code", "287082", "--at", "59"]) == 0
    assert "Success!" in capsys.readouterr().out


def test_verify_within_window(capsys):
    # counter 2 at t=59 is one step ahead
    assert main(["verify", "--secret", RFC_SECRET_B32, "--code", "359152", "--at", "59"]) == 0


def test_verify_failure(capsys):
    assert main(["verify", "--secret", RFC_SECRET_B32, "--code", "000000", "--at", "59"]) == 1
    assert "ERROR!" in capsys.readouterr().out


def test_verify_window_zero(capsys):
    args = ["verify", "--secret", RFC_SECRET_B32, "--code", "359152", "--at", "59", "--window", "0"]
    assert main(args) == 1


def test_verify_prompts_for_code(monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", lambda prompt="": " 287082\n")
    assert main(["verify", "--secret", RFC_SECRET_B32, "--at", "59"]) == 0
    assert "Success!" in capsys.readouterr().out


def test_verify_hotp(capsys):
    args = ["verify-hotp", "--secret", RFC_SECRET_B32, "--code", "254676", "--counter", "4"]
    assert main(args) == 0
    assert "next counter = 6" in capsys.readouterr().out

    args = ["verify-hotp", "--secret", RFC_SECRET_B32, "--code", "254676", "--counter", "6"]
    assert main(args) == 1


def test_init_prints_secret_and_uris(capsys):
    assert main(["init", "--account", "alice@example", "--issuer", "Acme"]) == 0
    lines = capsys.readouterr().out.splitlines()
    secret_b32 = lines[lines.index("Enter this key in your authenticator app (time based):") + 1].strip()
    assert len(decode_secret(secret_b32)) == 20
    assert any(f"otpauth://totp/Acme:alice@example?secret={secret_b32}" in line for line in lines)


def test_uri(capsys):
    assert main(["uri", "--secret", RFC_SECRET_B32.lower(), "--account", "bob", "--issuer", "Acme"]) == 0
    out = capsys.readouterr().out
    assert f"otpauth://totp/Acme:bob?secret={RFC_SECRET_B32}&issuer=Acme" in out
    assert "otpauth://hotp/Acme:bob?" in out


def test_bad_environment_setting(_env, capsys):
    _env.setenv("AUTHCODE_DIGITS", "many")
    assert main(["hotp", "--secret", RFC_SECRET_B32, "--counter", "0"]) == 2
    assert "AUTHCODE_DIGITS" in capsys.readouterr().err


def test_non_ascii_secret(capsys):
    assert main(["hotp", "--secret", "GEZDé", "--counter", "0"]) == 2
    assert "Invalid Base32" in capsys.readouterr().err


@pytest.mark.parametrize("command", ["totp", "verify"])
@pytest.mark.parametrize("at", ["nan", "inf"])
def test_non_finite_time(capsys, command, at):
    args = [command, "--secret", RFC_SECRET_B32, "--at", at]
    if command == "verify":
        args += ["--code", "287082"]
    assert main(args) == 2
    assert "finite" in capsys.readouterr().err
