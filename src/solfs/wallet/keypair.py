"""
Ed25519 Key Management for the Data Store SDK.

This module handles the Solana keypair used to:
- Pay fees and sign as data store authority
- Sign the creation of fresh data accounts

Keys are stored in ~/.solfs/.env as SOLFS_PRIVATE_KEY (base58 of the
64-byte secret). Solana CLI keypair files (JSON arrays) are also accepted.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from solders.keypair import Keypair


# Default config directory
SOLFS_DIR = Path.home() / ".solfs"
SOLFS_ENV = SOLFS_DIR / ".env"

PRIVATE_KEY_VAR = "SOLFS_PRIVATE_KEY"


def generate_keypair() -> tuple[str, str]:
    """
    Generate a new Ed25519 keypair.

    Returns:
        Tuple of (secret_base58, pubkey_base58)
    """
    keypair = Keypair()
    return str(keypair), str(keypair.pubkey())


def save_private_key(private_key: str, env_path: Optional[Path] = None) -> Path:
    """
    Save a base58 secret key to a .env file.

    Args:
        private_key: Base58-encoded 64-byte secret key
        env_path: Path to .env file (default: ~/.solfs/.env)

    Returns:
        Path to the saved .env file
    """
    env_path = env_path or SOLFS_ENV
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing = {}
    if env_path.exists():
        for line in env_path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                k, v = line.split("=", 1)
                existing[k.strip()] = v.strip()

    existing[PRIVATE_KEY_VAR] = private_key

    lines = [f"{k}={v}" for k, v in existing.items()]
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    # Set secure permissions on Unix
    if os.name != "nt":
        env_path.chmod(0o600)

    return env_path


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load the base58 secret key from .env file or environment.

    Args:
        env_path: Path to .env file (default: ~/.solfs/.env)

    Returns:
        Base58-encoded secret key

    Raises:
        ValueError: If SOLFS_PRIVATE_KEY is not set
    """
    env_path = env_path or SOLFS_ENV

    if env_path.exists():
        load_dotenv(env_path, override=True)

    private_key = os.environ.get(PRIVATE_KEY_VAR)
    if not private_key:
        raise ValueError(
            f"{PRIVATE_KEY_VAR} not found. Run 'solfs keygen' or set "
            f"{PRIVATE_KEY_VAR} in {env_path}"
        )
    return private_key.strip()


def load_keypair_file(path: Path) -> Keypair:
    """
    Load a Solana CLI keypair file (JSON array of 64 integers).

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a valid keypair
    """
    path = Path(path).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"Keypair file not found: {path}")
    try:
        return Keypair.from_json(path.read_text(encoding="utf-8").strip())
    except Exception as exc:
        raise ValueError(f"Invalid keypair file {path}: {exc}") from exc


def get_keypair(private_key: Optional[str] = None) -> Keypair:
    """
    Get a solders Keypair from a base58 secret key.

    Args:
        private_key: Base58 secret key. If None, loads from .env.
    """
    if private_key is None:
        private_key = load_private_key()
    try:
        return Keypair.from_base58_string(private_key)
    except Exception as exc:
        raise ValueError(f"Invalid {PRIVATE_KEY_VAR}: {exc}") from exc


def get_pubkey(private_key: Optional[str] = None) -> str:
    """Get the base58 public key for a secret key (default: from .env)."""
    return str(get_keypair(private_key).pubkey())


def resolve_keypair(keypair_path: Optional[str] = None) -> Keypair:
    """Use a keypair file when given, else the stored secret key."""
    if keypair_path:
        return load_keypair_file(Path(keypair_path))
    return get_keypair()
