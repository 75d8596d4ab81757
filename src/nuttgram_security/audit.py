"""Offline audit trail of display-security changes.

Every entry is a standalone JSON file signed with Ed25519 and hash-chained to
its predecessor through ``chain.state``. Enabled with ``NUTTGRAM_AUDIT=1``.
"""

from __future__ import annotations

import hashlib
import json
import os
import time
import uuid
from pathlib import Path
from typing import Any, Dict

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey

GENESIS = "GENESIS"


class AuditError(RuntimeError):
    """Raised when an audit entry or its signing key cannot be read."""


def audit_dir() -> Path:
    """Return the directory where audit artefacts are stored.

    ``NUTTGRAM_AUDIT_DIR`` points the trail somewhere else; otherwise entries
    live under the user's home directory.
    """

    override = os.environ.get("NUTTGRAM_AUDIT_DIR")
    directory = Path(override).expanduser() if override else Path.home() / ".nuttgram_audit"
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def _load_private_key(directory: Path) -> Ed25519PrivateKey:
    key_path = directory / "signing_key.pem"
    if key_path.exists():
        key = serialization.load_pem_private_key(key_path.read_bytes(), password=None)
        if not isinstance(key, Ed25519PrivateKey):
            raise AuditError(f"{key_path} does not hold an Ed25519 key")
        return key
    private_key = Ed25519PrivateKey.generate()
    key_path.write_bytes(
        private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    return private_key


def _load_public_key(directory: Path) -> Ed25519PublicKey:
    key_path = directory / "signing_key.pem"
    try:
        data = key_path.read_bytes()
    except FileNotFoundError as exc:
        raise AuditError(f"no signing key in {directory}") from exc
    key = serialization.load_pem_private_key(data, password=None)
    if not isinstance(key, Ed25519PrivateKey):
        raise AuditError(f"{key_path} does not hold an Ed25519 key")
    return key.public_key()


def _load_prev_hash(directory: Path) -> str:
    try:
        return (directory / "chain.state").read_text().strip() or GENESIS
    except FileNotFoundError:
        return GENESIS


def _canonical(payload: Dict[str, Any]) -> bytes:
    return json.dumps(payload, ensure_ascii=False, sort_keys=True).encode("utf-8")


def record_event(event: str, *, details: Dict[str, Any] | None = None) -> Path:
    directory = audit_dir()
    timestamp = int(time.time())
    payload = {
        "event": event,
        "details": details or {},
        "timestamp": timestamp,
        "prev_hash": _load_prev_hash(directory),
    }
    message = _canonical(payload)
    signature = _load_private_key(directory).sign(message)
    chain_hash = hashlib.sha3_512(message + signature).hexdigest()
    entry = {
        "payload": payload,
        "signature": signature.hex(),
        "chain_hash": chain_hash,
    }
    file_path = directory / f"audit_{timestamp}_{uuid.uuid4().hex}.json"
    file_path.write_text(json.dumps(entry, ensure_ascii=False, indent=2))
    (directory / "chain.state").write_text(chain_hash)
    return file_path


def record_secure_mode(secure: bool) -> Path:
    """Observer for :class:`SecureDisplayToggle` state changes."""

    event = "display.secure.enabled" if secure else "display.secure.disabled"
    return record_event(event, details={"secure": secure})


def verify_log(path: os.PathLike[str] | str) -> bool:
    try:
        data = json.loads(Path(path).read_text())
        payload = _canonical(data["payload"])
        signature = bytes.fromhex(data["signature"])
    except (OSError, ValueError, KeyError, TypeError) as exc:
        raise AuditError(f"unreadable audit entry {path}: {exc}") from exc
    # The signing key sits next to the entries it signed; never create one here.
    public_key = _load_public_key(Path(path).parent)
    try:
        public_key.verify(signature, payload)
    except InvalidSignature:
        return False
    expected_chain_hash = hashlib.sha3_512(payload + signature).hexdigest()
    return expected_chain_hash == data.get("chain_hash")


__all__ = ["AuditError", "audit_dir", "record_event", "record_secure_mode", "verify_log"]
