import io
import json

import pytest

import otp
from otp import main


def _stored(path):
    return json.loads(path.read_text())["secrets"]


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "usage: otp" in capsys.readouterr().out


def test_add_and_get(storage_path, frozen_time, clipboard, rfc_secret, capsys):
    assert main(["add", "rfc", rfc_secret, "--digits", "8"]) == 0
    assert "✓ Added 'rfc'" in capsys.readouterr().out
    assert _stored(storage_path) == {"rfc": {"secret": rfc_secret, "digits": 8, "period": 30}}

    assert main(["get", "rfc", "--verbose"]) == 0
    out = capsys.readouterr().out
    assert out.splitlines() == ["94287082 (copied to clipboard)", "Valid for 1s"]
    assert clipboard == ["94287082"]


def test_get_no_copy(storage_path, frozen_time, clipboard, rfc_secret, capsys):
    main(["add", "rfc", rfc_secret])
    capsys.readouterr()
    assert main(["get", "rfc", "--no-copy"]) == 0
    assert capsys.readouterr().out.strip() == "287082"
    assert clipboard == []


def test_add_uri_only(storage_path, capsys):
    uri = "otpauth://totp/Example:alice@site.com?secret=JBSWY3DPEHPK3PXP&period=60"
    assert main(["add", uri]) == 0
    assert "Example:alice@site.com" in _stored(storage_path)


def test_add_uri_warns_about_algorithm(storage_path, caplog):
    uri = "otpauth://totp/me?secret=JBSWY3DPEHPK3PXP&algorithm=SHA256"
    with caplog.at_level("WARNING", logger="otp"):
        assert main(["add", "x", uri]) == 0
    assert "SHA256" in caplog.text


def test_add_without_secret(storage_path, capsys):
    assert main(["add", "github"]) == 1
    assert "secret is required" in capsys.readouterr().err
    assert not storage_path.exists()


def test_add_duplicate_fails_without_rewrite(storage_path, capsys):
    main(["add", "github", "JBSWY3DPEHPK3PXP"])
    before = storage_path.read_text()
    assert main(["add", "github", "GEZDGNBVGY3TQOJQ"]) == 1
    assert "Error: 'github' already exists" in capsys.readouterr().err
    assert storage_path.read_text() == before


def test_add_invalid_secret(storage_path, capsys):
    assert main(["add", "github", "not-base32!"]) == 1
    assert "Error:" in capsys.readouterr().err
    assert not storage_path.exists()


def test_get_missing(storage_path, capsys):
    assert main(["get", "nope"]) == 1
    assert "'nope' not found" in capsys.readouterr().err


def test_list(storage_path, frozen_time, rfc_secret, capsys):
    assert main(["list"]) == 0
    assert "No OTP secrets stored" in capsys.readouterr().out

    main(["add", "zeta", rfc_secret, "-d", "8"])
    main(["add", "alpha", rfc_secret, "-p", "60"])
    capsys.readouterr()

    assert main(["list"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split() == ["Name", "Code", "Expires"]
    assert lines[2].split() == ["alpha", otp.hotp(rfc_secret, 0), "1s"]
    assert lines[3].split() == ["zeta", "94287082", "1s"]


def test_remove_with_confirmation(storage_path, monkeypatch, capsys):
    main(["add", "github", "JBSWY3DPEHPK3PXP"])

    monkeypatch.setattr("builtins.input", lambda prompt: "n")
    assert main(["remove", "github"]) == 0
    assert "Cancelled" in capsys.readouterr().out
    assert "github" in _stored(storage_path)

    monkeypatch.setattr("builtins.input", lambda prompt: "y")
    assert main(["remove", "github"]) == 0
    assert _stored(storage_path) == {}


def test_remove_missing(storage_path, capsys):
    assert main(["remove", "github", "--force"]) == 1
    assert "not found" in capsys.readouterr().err


def test_rename(storage_path, capsys):
    main(["add", "a", "JBSWY3DPEHPK3PXP"])
    main(["add", "b", "GEZDGNBVGY3TQOJQ"])

    assert main(["rename", "a", "b"]) == 1
    assert set(_stored(storage_path)) == {"a", "b"}

    assert main(["rename", "a", "c"]) == 0
    assert set(_stored(storage_path)) == {"b", "c"}


def test_import_partial_commit(storage_path, tmp_path, capsys):
    main(["add", "B:two", "JBSWY3DPEHPK3PXP"])
    source = tmp_path / "export.txt"
    source.write_text(
        "otpauth://totp/A:one?secret=JBSWY3DPEHPK3PXP\n"
        "otpauth://totp/B:two?secret=GEZDGNBVGY3TQOJQ\n"
        "otpauth://totp/C:three?secret=MFRGGZDFMZTWQ2LK\n"
    )
    capsys.readouterr()

    assert main(["import", str(source)]) == 1
    captured = capsys.readouterr()
    assert "✓ Imported 2 entries" in captured.out
    assert "Line 2" in captured.err
    stored = _stored(storage_path)
    assert set(stored) == {"A:one", "B:two", "C:three"}
    assert stored["B:two"]["secret"] == "JBSWY3DPEHPK3PXP"


def test_import_dry_run(storage_path, tmp_path, capsys):
    source = tmp_path / "export.txt"
    source.write_text("otpauth://totp/A:one?secret=JBSWY3DPEHPK3PXP\n")
    assert main(["import", "--dry-run", str(source)]) == 0
    assert "1 entries would be imported" in capsys.readouterr().out
    assert not storage_path.exists()


def test_import_from_stdin(storage_path, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("otpauth://totp/A:one?secret=JBSWY3DPEHPK3PXP\n"))
    assert main(["import", "-"]) == 0
    assert "A:one" in _stored(storage_path)


def test_import_missing_file(storage_path, tmp_path, capsys):
    assert main(["import", str(tmp_path / "nope.txt")]) == 1
    assert "Cannot read" in capsys.readouterr().err


def test_export(storage_path, capsys):
    main(["add", "Example:alice@site.com", "JBSWY3DPEHPK3PXP"])
    capsys.readouterr()
    assert main(["export", "Example:alice@site.com"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "Secret: JBSWY3DPEHPK3PXP"
    assert out[1] == "URI: otpauth://totp/Example:alice@site.com?secret=JBSWY3DPEHPK3PXP&digits=6&period=30"


def test_corrupt_store_is_not_overwritten(storage_path, capsys):
    storage_path.parent.mkdir(parents=True)
    storage_path.write_text("{oops")

    assert main(["add", "github", "JBSWY3DPEHPK3PXP"]) == 1
    assert "not valid JSON" in capsys.readouterr().err
    assert storage_path.read_text() == "{oops"


def test_store_flag_overrides_environment(storage_path, tmp_path):
    other = tmp_path / "other.json"
    assert main(["--store", str(other), "add", "github", "JBSWY3DPEHPK3PXP"]) == 0
    assert other.exists()
    assert not storage_path.exists()


def test_legacy_file_is_upgraded_on_write(storage_path):
    storage_path.parent.mkdir(parents=True)
    storage_path.write_text('{"old": {"secret": "JBSWY3DPEHPK3PXP", "size": 8, "period": 30}}')

    assert main(["add", "new", "GEZDGNBVGY3TQOJQ"]) == 0
    data = json.loads(storage_path.read_text())
    assert data["encrypted"] is False
    assert data["secrets"]["old"] == {"secret": "JBSWY3DPEHPK3PXP", "digits": 8, "period": 30}


@pytest.mark.parametrize("flag", ["1", "true", "on"])
def test_debug_environment_flag(storage_path, monkeypatch, flag):
    monkeypatch.setenv("OTP_DEBUG", flag)
    assert main(["list"]) == 0
    assert otp.logger.level == otp.logging.DEBUG


def test_invalid_stored_entry_is_reported_and_not_rewritten(storage_path, capsys):
    storage_path.parent.mkdir(parents=True)
    storage_path.write_text(json.dumps({
        "secrets": {
            "a": {"secret": "JBSWY3DPEHPK3PXP", "digits": 6, "period": 0},
            "b": {"secret": "GEZDGNBVGY3TQOJQ", "digits": 6, "period": 30},
        },
        "encrypted": False,
    }))
    before = storage_path.read_text()

    assert main(["list"]) == 1
    assert "Invalid entry 'a'" in capsys.readouterr().err

    assert main(["add", "c", "MFRGGZDFMZTWQ2LK"]) == 1
    assert storage_path.read_text() == before


def test_add_uri_with_extra_secret_is_rejected(storage_path, capsys):
    uri = "otpauth://totp/x?secret=JBSWY3DPEHPK3PXP"
    assert main(["add", uri, "JBSWY3DP"]) == 1
    assert "pass it alone" in capsys.readouterr().err
    assert not storage_path.exists()


def test_missing_clipboard_warns(monkeypatch, caplog):
    monkeypatch.setattr(otp, "CLIPBOARD_AVAILABLE", False)
    with caplog.at_level("WARNING", logger="otp"):
        assert otp.copy_to_clipboard("123456") is False
    assert "pyperclip not installed" in caplog.text
