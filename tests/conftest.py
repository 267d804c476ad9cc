import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import otp  # noqa: E402


# Base32 of the RFC 4226 / RFC 6238 test key "12345678901234567890"
RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


@pytest.fixture()
def rfc_secret():
    return RFC_SECRET


@pytest.fixture()
def storage_path(tmp_path, monkeypatch):
    path = tmp_path / "data" / "secrets.json"
    monkeypatch.setenv("OTP_CLI_STORAGE", str(path))
    monkeypatch.delenv("OTP_DEBUG", raising=False)
    return path


@pytest.fixture()
def frozen_time(monkeypatch):
    """Pin the CLI clock to RFC 6238's first test time"""
    now = 59
    monkeypatch.setattr(otp, "current_timestamp", lambda: now)
    return now


@pytest.fixture()
def clipboard(monkeypatch):
    copied = []

    def fake_copy(text):
        copied.append(text)
        return True

    monkeypatch.setattr(otp, "copy_to_clipboard", fake_copy)
    return copied
