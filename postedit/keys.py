"""RSA key pair generation for token signing."""

from __future__ import annotations

import logging
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

logger = logging.getLogger(__name__)


def generate_key_pair(key_size: int = 2048) -> tuple[str, str]:
    """
    Generate an RSA key pair for RS256 tokens.

    Returns:
        Tuple of (private_key_pem, public_key_pem) as strings
    """
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)

    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")
    return private_pem, public_pem


def write_key_pair(
    private_path: str | Path,
    public_path: str | Path,
    overwrite: bool = False,
) -> None:
    """Write a fresh key pair to disk. Refuses to replace existing keys unless told to."""
    private_path = Path(private_path)
    public_path = Path(public_path)
    if not overwrite and (private_path.exists() or public_path.exists()):
        raise FileExistsError(
            f"Refusing to overwrite {private_path} / {public_path}; pass overwrite=True"
        )

    private_pem, public_pem = generate_key_pair()
    private_path.write_text(private_pem, encoding="ascii")
    private_path.chmod(0o600)
    public_path.write_text(public_pem, encoding="ascii")
    logger.info(f"Wrote key pair to {private_path} and {public_path}")
