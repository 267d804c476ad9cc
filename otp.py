#!/usr/bin/env python3
"""
OTP CLI - A simple command-line TOTP manager
Usage:
    otp add <name> <secret> [--digits N] [--period N]
    otp add <otpauth://totp/...>
    otp get <name>
    otp list
    otp remove <name>
    otp rename <old> <new>
    otp import <file>
    otp export <name>
"""

import argparse
import base64
import fcntl
import hashlib
import hmac
import json
import logging
import os
import struct
import sys
import tempfile
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator
from urllib.parse import parse_qs, quote, unquote, urlencode, urlsplit

# Optional: for clipboard support
try:
    import pyperclip
    CLIPBOARD_AVAILABLE = True
except ImportError:
    CLIPBOARD_AVAILABLE = False


logger = logging.getLogger("otp")

DEFAULT_DIGITS = 6
DEFAULT_PERIOD = 30
# 10 ** digits must stay inside the 32-bit unsigned modulus domain
MAX_DIGITS = 9
OTPAUTH_PREFIX = "otpauth://"


# ==================== Errors ====================

class OtpError(Exception):
    """Base class for every failure the OTP core reports"""


class DecodeError(OtpError):
    """Secret is not valid Base32 or decodes to nothing"""


class ConfigError(OtpError):
    """Invalid digits, period, counter or name"""


class OtpauthUriError(OtpError):
    """otpauth URI could not be used"""


class UnsupportedModeError(OtpauthUriError):
    """URI is not an otpauth://totp URI"""


class MissingSecretError(OtpauthUriError):
    """URI has no secret parameter"""


class MalformedParameterError(OtpauthUriError):
    """A URI parameter has an unusable value"""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class DuplicateNameError(OtpError):
    def __init__(self, name: str):
        super().__init__(f"'{name}' already exists")
        self.name = name


class NotFoundError(OtpError):
    def __init__(self, name: str):
        super().__init__(f"'{name}' not found")
        self.name = name


class CorruptStoreError(OtpError):
    """Storage file exists but cannot be read back"""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


# ==================== TOTP Implementation ====================

def normalize_secret(secret: str) -> str:
    """Strip whitespace and padding, uppercase"""
    return "".join(secret.split()).upper().rstrip("=")


def decode_secret(secret: str) -> bytes:
    """Decode a Base32 secret (RFC 4648, padding optional)"""
    cleaned = normalize_secret(secret)
    if not cleaned:
        raise DecodeError("Secret is empty")

    # Add padding if needed
    padded = cleaned + "=" * (-len(cleaned) % 8)
    try:
        key = base64.b32decode(padded)
    except ValueError as e:
        raise DecodeError(f"Invalid secret key format: {e}") from e

    if not key:
        raise DecodeError("Secret is empty")
    return key


def _check_digits(digits: int) -> None:
    if isinstance(digits, bool) or not isinstance(digits, int) or not 1 <= digits <= MAX_DIGITS:
        raise ConfigError(f"Digits must be between 1 and {MAX_DIGITS}, got {digits!r}")


def _check_period(period: int) -> None:
    if isinstance(period, bool) or not isinstance(period, int) or period <= 0:
        raise ConfigError(f"Period must be a positive number of seconds, got {period!r}")


def hotp(secret: str, counter: int, digits: int = DEFAULT_DIGITS) -> str:
    """Generate HOTP code (RFC 4226)"""
    key = decode_secret(secret)
    _check_digits(digits)
    if not 0 <= counter < 2 ** 64:
        raise ConfigError(f"Counter out of range: {counter}")

    # Counter as 8-byte big-endian
    counter_bytes = struct.pack(">Q", counter)

    # HMAC-SHA1, always 20 bytes so offset + 4 never overruns
    hmac_hash = hmac.new(key, counter_bytes, hashlib.sha1).digest()

    # Dynamic truncation
    offset = hmac_hash[-1] & 0x0F
    truncated = struct.unpack(">I", hmac_hash[offset:offset + 4])[0] & 0x7FFFFFFF

    otp = truncated % (10 ** digits)
    return str(otp).zfill(digits)


def totp(secret: str, now: float, digits: int = DEFAULT_DIGITS, period: int = DEFAULT_PERIOD) -> str:
    """Generate TOTP code (RFC 6238) for the epoch timestamp `now`"""
    _check_period(period)
    return hotp(secret, int(now // period), digits)


def get_time_remaining(period: int, now: float) -> int:
    """Get seconds remaining until next TOTP rotation, in [1, period]"""
    _check_period(period)
    return period - (int(now) % period)


# ==================== Credentials ====================

@dataclass
class Credential:
    """A stored secret and the parameters needed to reproduce its codes"""

    secret: str
    digits: int = DEFAULT_DIGITS
    period: int = DEFAULT_PERIOD

    def validate(self) -> None:
        decode_secret(self.secret)
        _check_digits(self.digits)
        _check_period(self.period)

    def to_dict(self) -> dict:
        return {"secret": self.secret, "digits": self.digits, "period": self.period}

    @classmethod
    def from_dict(cls, entry) -> "Credential":
        """Build from a stored entry; old files use `size` for digits or a bare secret string"""
        if isinstance(entry, str):
            return cls(secret=entry)
        if not isinstance(entry, dict):
            raise ValueError(f"expected an object, got {type(entry).__name__}")

        secret = entry.get("secret")
        if not isinstance(secret, str):
            raise ValueError("missing secret")
        digits = entry.get("digits", entry.get("size", DEFAULT_DIGITS))
        period = entry.get("period", DEFAULT_PERIOD)
        for key, value in (("digits", digits), ("period", period)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{key} must be an integer")
        return cls(secret=secret, digits=digits, period=period)


# ==================== otpauth URIs ====================

def is_otpauth_uri(value: str) -> bool:
    return value.lstrip().startswith(OTPAUTH_PREFIX)


def _positive_param(query: dict, key: str, default: int) -> int:
    values = query.get(key)
    if not values:
        return default
    raw = values[0]
    if not (raw.isascii() and raw.isdigit()) or int(raw) <= 0:
        raise MalformedParameterError(f"Invalid {key} parameter: {raw!r}", field=key)
    return int(raw)


def parse_otpauth_uri(uri: str) -> tuple[str, Credential]:
    """Parse a standard otpauth://totp/ URI into (name, credential).

    The decoded label becomes the name as-is, so "Issuer:account" labels are
    kept whole. Parameters other than secret, digits and period are ignored;
    codes are always HMAC-SHA1 (see requested_algorithm).
    """
    try:
        parsed = urlsplit(uri.strip())
    except ValueError as e:
        raise OtpauthUriError(f"Malformed otpauth URI: {e}") from e

    if parsed.scheme != "otpauth":
        raise UnsupportedModeError(f"Not an otpauth URI: {uri!r}")
    if parsed.netloc != "totp":
        raise UnsupportedModeError(f"Unsupported OTP type '{parsed.netloc}', only totp is supported")

    label = unquote(parsed.path[1:] if parsed.path.startswith("/") else parsed.path)
    if not label:
        raise MalformedParameterError("otpauth URI has no label", field="label")

    query = parse_qs(parsed.query, keep_blank_values=True)
    secret = query.get("secret", [""])[0]
    if not secret.strip():
        raise MissingSecretError("otpauth URI has no secret")

    credential = Credential(
        secret=normalize_secret(secret),
        digits=_positive_param(query, "digits", DEFAULT_DIGITS),
        period=_positive_param(query, "period", DEFAULT_PERIOD),
    )
    return label, credential


def requested_algorithm(uri: str) -> str | None:
    """Return the URI's algorithm if it asks for something other than SHA1"""
    try:
        query = parse_qs(urlsplit(uri.strip()).query)
    except ValueError:
        return None
    algorithm = query.get("algorithm", [""])[0].strip().upper()
    if algorithm and algorithm != "SHA1":
        return algorithm
    return None


def format_otpauth_uri(name: str, credential: Credential) -> str:
    """Build the otpauth://totp/ URI that parses back to (name, credential)"""
    params = urlencode({
        "secret": credential.secret,
        "digits": credential.digits,
        "period": credential.period,
    })
    return f"otpauth://totp/{quote(name, safe=':@')}?{params}"


# ==================== Storage ====================

class CredentialStore:
    """In-memory name -> Credential map with JSON (de)serialization"""

    def __init__(self, credentials: dict[str, Credential] | None = None):
        self._credentials: dict[str, Credential] = dict(credentials or {})

    def __contains__(self, name: str) -> bool:
        return name in self._credentials

    def __len__(self) -> int:
        return len(self._credentials)

    def __iter__(self) -> Iterator[str]:
        return iter(self._credentials)

    def __eq__(self, other) -> bool:
        if not isinstance(other, CredentialStore):
            return NotImplemented
        return self._credentials == other._credentials

    def items(self):
        return self._credentials.items()

    def get(self, name: str) -> Credential:
        try:
            return self._credentials[name]
        except KeyError:
            raise NotFoundError(name) from None

    def insert(self, name: str, credential: Credential) -> None:
        if not name:
            raise ConfigError("Name must not be empty")
        if name in self._credentials:
            raise DuplicateNameError(name)
        self._credentials[name] = credential

    def remove(self, name: str) -> None:
        if name not in self._credentials:
            raise NotFoundError(name)
        del self._credentials[name]

    def rename(self, old: str, new: str) -> None:
        """Rename `old` to `new`; never overwrites an existing entry"""
        if old not in self._credentials:
            raise NotFoundError(old)
        if not new:
            raise ConfigError("Name must not be empty")
        if new in self._credentials:
            raise DuplicateNameError(new)
        self._credentials[new] = self._credentials.pop(old)

    def dumps(self) -> str:
        secrets = {name: self._credentials[name].to_dict() for name in sorted(self._credentials)}
        return json.dumps({"secrets": secrets, "encrypted": False}, indent=2) + "\n"

    @classmethod
    def loads(cls, blob: str | bytes | None, source: Path | None = None) -> "CredentialStore":
        """Parse a stored blob. Empty means no data; anything unparsable is corrupt."""
        if isinstance(blob, bytes):
            try:
                blob = blob.decode("utf-8")
            except UnicodeDecodeError as e:
                raise CorruptStoreError(f"Storage is not UTF-8: {e}", path=source) from e
        if blob is None or not blob.strip():
            return cls()

        try:
            data = json.loads(blob)
        except json.JSONDecodeError as e:
            raise CorruptStoreError(f"Storage is not valid JSON: {e}", path=source) from e
        if not isinstance(data, dict):
            raise CorruptStoreError("Storage must contain a JSON object", path=source)

        if data.get("encrypted") is True:
            raise CorruptStoreError("Encrypted storage is not supported", path=source)

        # Current files are {"secrets": ..., "encrypted": false}, always with
        # "encrypted"; older ones are a bare name -> entry map.
        if "encrypted" in data and isinstance(data.get("secrets"), dict) and set(data) <= {"secrets", "encrypted"}:
            entries = data["secrets"]
        else:
            entries = data

        credentials = {}
        for name, entry in entries.items():
            if not name:
                raise CorruptStoreError("Storage has an entry with an empty name", path=source)
            try:
                credential = Credential.from_dict(entry)
                credential.validate()
            except (ValueError, OtpError) as e:
                raise CorruptStoreError(f"Invalid entry '{name}': {e}", path=source) from e
            credentials[name] = credential
        return cls(credentials)


def get_storage_path(override: str | None = None) -> Path:
    """Get the path to the storage file"""
    if override:
        return Path(override).expanduser()
    env_path = os.environ.get("OTP_CLI_STORAGE")
    if env_path:
        return Path(env_path).expanduser()
    # Use XDG_DATA_HOME or fallback to ~/.local/share
    xdg_data = os.environ.get("XDG_DATA_HOME") or os.path.expanduser("~/.local/share")
    return Path(xdg_data) / "otp-cli" / "secrets.json"


def load_store(path: Path) -> CredentialStore:
    """Load the store; a missing file is an empty store"""
    try:
        blob = path.read_bytes()
    except FileNotFoundError:
        logger.debug("No storage at %s, starting empty", path)
        return CredentialStore()
    except OSError as e:
        raise CorruptStoreError(f"Cannot read {path}: {e}", path=path) from e

    store = CredentialStore.loads(blob, source=path)
    logger.debug("Loaded %d credentials from %s", len(store), path)
    return store


def save_store(store: CredentialStore, path: Path) -> None:
    """Replace the storage file atomically with the whole store"""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(store.dumps())
            f.flush()
            os.fsync(f.fileno())
        # Set restrictive permissions
        os.chmod(tmp_name, 0o600)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
    logger.debug("Saved %d credentials to %s", len(store), path)


@contextmanager
def storage_lock(path: Path):
    """Hold an exclusive lock on <path>.lock for a load-mutate-save cycle"""
    lock_path = path.with_name(path.name + ".lock")
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    with open(lock_path, "a") as lock_file:
        logger.debug("Waiting for lock %s", lock_path)
        fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
            logger.debug("Released lock %s", lock_path)


# ==================== Registry ====================

def add_credential(
    store: CredentialStore,
    name: str,
    secret_or_uri: str,
    digits: int = DEFAULT_DIGITS,
    period: int = DEFAULT_PERIOD,
) -> str:
    """Add a credential and return the name it was stored under.

    An otpauth:// URI brings its own name, digits and period; the explicit
    arguments are ignored in that case.
    """
    if is_otpauth_uri(secret_or_uri):
        name, credential = parse_otpauth_uri(secret_or_uri)
    else:
        credential = Credential(normalize_secret(secret_or_uri), digits, period)
    credential.validate()
    store.insert(name, credential)
    return name


def remove_credential(store: CredentialStore, name: str) -> None:
    store.remove(name)


def rename_credential(store: CredentialStore, old: str, new: str) -> None:
    store.rename(old, new)


def get_code(store: CredentialStore, name: str, now: float) -> str:
    """Current TOTP code for `name`"""
    credential = store.get(name)
    return totp(credential.secret, now, credential.digits, credential.period)


def export_credential(store: CredentialStore, name: str) -> str:
    return format_otpauth_uri(name, store.get(name))


class CodeListing:
    """(name, code, seconds remaining) for every credential, computed on iteration"""

    def __init__(self, store: CredentialStore, now: float):
        self._store = store
        self._now = now

    def __iter__(self) -> Iterator[tuple[str, str, int]]:
        for name, credential in self._store.items():
            code = totp(credential.secret, self._now, credential.digits, credential.period)
            yield name, code, get_time_remaining(credential.period, self._now)


def list_codes(store: CredentialStore, now: float) -> CodeListing:
    return CodeListing(store, now)


@dataclass
class ImportFailure:
    line_number: int
    line: str
    error: OtpError


@dataclass
class ImportReport:
    imported: list[str] = field(default_factory=list)
    failures: list[ImportFailure] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.imported)


def import_credentials(store: CredentialStore, lines: Iterable[str]) -> ImportReport:
    """Import every otpauth:// line; valid lines are kept even when others fail.

    Lines not starting with otpauth:// are skipped. Each failing line is
    recorded with its 1-based line number, including names that clash with
    an entry added earlier in the same batch.
    """
    report = ImportReport()
    for line_number, raw in enumerate(lines, 1):
        line = raw.strip()
        if not line.startswith(OTPAUTH_PREFIX):
            continue
        try:
            name, credential = parse_otpauth_uri(line)
            credential.validate()
            store.insert(name, credential)
        except OtpError as e:
            report.failures.append(ImportFailure(line_number, line, e))
        else:
            report.imported.append(name)
    return report


# ==================== Clipboard ====================

def copy_to_clipboard(text: str) -> bool:
    """Copy text to the clipboard, returning False when it is unavailable"""
    if not CLIPBOARD_AVAILABLE:
        logger.warning("pyperclip not installed, code not copied to clipboard")
        return False
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        logger.warning("Could not copy to clipboard: %s", e)
        return False
    return True


def current_timestamp() -> int:
    return int(time.time())


# ==================== Commands ====================

def _warn_algorithm(uri: str) -> None:
    algorithm = requested_algorithm(uri)
    if algorithm:
        logger.warning("URI requests %s but only SHA1 is supported; codes will use SHA1", algorithm)


def cmd_add(args, storage_path: Path) -> int:
    """Add a new OTP secret"""
    if args.secret is None:
        if not is_otpauth_uri(args.name):
            print("Error: a secret is required unless an otpauth:// URI is given", file=sys.stderr)
            return 1
        name, secret = "", args.name
    elif is_otpauth_uri(args.name):
        print("Error: an otpauth:// URI brings its own name and secret; pass it alone", file=sys.stderr)
        return 1
    else:
        name, secret = args.name, args.secret

    if is_otpauth_uri(secret):
        _warn_algorithm(secret)

    with storage_lock(storage_path):
        store = load_store(storage_path)
        name = add_credential(store, name, secret, args.digits, args.period)
        save_store(store, storage_path)

    print(f"✓ Added '{name}'")
    return 0


def cmd_get(args, storage_path: Path) -> int:
    """Get OTP code for a name"""
    store = load_store(storage_path)
    now = current_timestamp()
    code = get_code(store, args.name, now)

    clipboard_msg = ""
    if not args.no_copy and copy_to_clipboard(code):
        clipboard_msg = " (copied to clipboard)"

    print(f"{code}{clipboard_msg}")

    if args.verbose:
        remaining = get_time_remaining(store.get(args.name).period, now)
        print(f"Valid for {remaining}s")
    return 0


def cmd_list(args, storage_path: Path) -> int:
    """List all stored credentials with their current codes"""
    store = load_store(storage_path)

    if not len(store):
        print("No OTP secrets stored")
        print("Add one with: otp add <name> <secret>")
        return 0

    rows = sorted(list_codes(store, current_timestamp()))

    name_width = max(len("Name"), max(len(r[0]) for r in rows)) + 4
    code_width = max(len("Code"), max(len(r[1]) for r in rows)) + 4

    print(f"{'Name':<{name_width}}{'Code':<{code_width}}{'Expires'}")
    print("-" * (name_width + code_width + 8))

    for name, code, remaining in rows:
        print(f"{name:<{name_width}}{code:<{code_width}}{remaining}s")
    return 0


def cmd_remove(args, storage_path: Path) -> int:
    """Remove an OTP secret"""
    # Fail before prompting; the lock is only taken for the write
    load_store(storage_path).get(args.name)

    if not args.force:
        confirm = input(f"Remove '{args.name}'? [y/N]: ")
        if confirm.lower() != "y":
            print("Cancelled")
            return 0

    with storage_lock(storage_path):
        store = load_store(storage_path)
        remove_credential(store, args.name)
        save_store(store, storage_path)

    print(f"✓ Removed '{args.name}'")
    return 0


def cmd_rename(args, storage_path: Path) -> int:
    """Rename an OTP secret"""
    with storage_lock(storage_path):
        store = load_store(storage_path)
        rename_credential(store, args.old, args.new)
        save_store(store, storage_path)

    print(f"✓ Renamed '{args.old}' to '{args.new}'")
    return 0


def _read_lines(source: str) -> list[str]:
    if source == "-":
        return sys.stdin.read().splitlines()
    try:
        return Path(source).read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise OtpError(f"Cannot read {source}: {e}") from e


def cmd_import(args, storage_path: Path) -> int:
    """Import otpauth://totp/ URIs, one per line"""
    lines = _read_lines(args.file)
    for line in lines:
        if is_otpauth_uri(line):
            _warn_algorithm(line)

    with storage_lock(storage_path):
        store = load_store(storage_path)
        report = import_credentials(store, lines)
        if report.changed and not args.dry_run:
            save_store(store, storage_path)

    for name in report.imported:
        print(f"✓ Imported '{name}'")
    for failure in report.failures:
        print(f"✗ Line {failure.line_number}: {failure.error}", file=sys.stderr)

    if args.dry_run:
        print(f"\nDry run - {len(report.imported)} entries would be imported")
    else:
        print(f"\n✓ Imported {len(report.imported)} entries")

    if not report.imported and not report.failures:
        print("No otpauth:// lines found")
    return 1 if report.failures else 0


def cmd_export(args, storage_path: Path) -> int:
    """Export secret for a name (for backup)"""
    store = load_store(storage_path)
    credential = store.get(args.name)

    print(f"Secret: {credential.secret}")
    print(f"URI: {export_credential(store, args.name)}")
    return 0


# ==================== Main ====================

_TRUTHY = {"1", "true", "yes", "on"}


def configure_logging(debug: bool = False) -> None:
    if not debug:
        debug = os.environ.get("OTP_DEBUG", "").strip().lower() in _TRUTHY
    level = logging.DEBUG if debug else logging.WARNING
    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s" if debug else "%(levelname)s: %(message)s"
    logging.basicConfig(level=level, format=fmt, stream=sys.stderr)
    logger.setLevel(level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="otp",
        description="OTP CLI - A simple command-line TOTP manager",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("--store", help="Path to the secrets file (default: $OTP_CLI_STORAGE or XDG data dir)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Add command
    add_parser = subparsers.add_parser("add", help="Add a new OTP secret")
    add_parser.add_argument("name", help="Name for the secret, or an otpauth://totp/ URI")
    add_parser.add_argument("secret", nargs="?", help="Base32 encoded secret key or otpauth://totp/ URI")
    add_parser.add_argument("--digits", "-d", type=int, default=DEFAULT_DIGITS, help="Number of digits (default: 6)")
    add_parser.add_argument("--period", "-p", type=int, default=DEFAULT_PERIOD, help="Time period in seconds (default: 30)")

    # Get command
    get_parser = subparsers.add_parser("get", help="Get OTP code")
    get_parser.add_argument("name", help="Name of the secret")
    get_parser.add_argument("--verbose", "-v", action="store_true", help="Show time remaining")
    get_parser.add_argument("--no-copy", action="store_true", help="Do not copy the code to the clipboard")

    # List command
    subparsers.add_parser("list", help="List all stored secrets with current codes")

    # Remove command
    remove_parser = subparsers.add_parser("remove", help="Remove an OTP secret")
    remove_parser.add_argument("name", help="Name to remove")
    remove_parser.add_argument("--force", "-f", action="store_true", help="Skip confirmation")

    # Rename command
    rename_parser = subparsers.add_parser("rename", help="Rename an OTP secret")
    rename_parser.add_argument("old", help="Current name")
    rename_parser.add_argument("new", help="New name")

    # Import command
    import_parser = subparsers.add_parser("import", help="Import otpauth://totp/ URIs from a file")
    import_parser.add_argument("file", help="File with one URI per line, or - for stdin")
    import_parser.add_argument("--dry-run", "-n", action="store_true", help="Show what would be imported without saving")

    # Export command
    export_parser = subparsers.add_parser("export", help="Export secret (for backup)")
    export_parser.add_argument("name", help="Name to export")

    return parser


COMMANDS = {
    "add": cmd_add,
    "get": cmd_get,
    "list": cmd_list,
    "remove": cmd_remove,
    "rename": cmd_rename,
    "import": cmd_import,
    "export": cmd_export,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(args.debug)
    storage_path = get_storage_path(args.store)
    logger.debug("Running %s with storage %s", args.command, storage_path)

    try:
        return COMMANDS[args.command](args, storage_path)
    except OtpError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nCancelled", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
