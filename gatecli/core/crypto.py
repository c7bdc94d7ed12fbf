"""AES-GCM helpers shared by the master secret and credential stores"""

import base64
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from gatecli.exceptions import KeystoreError

NONCE_SIZE = 12
KEY_SIZE = 32


def derive_key(secret: str, salt: bytes, info: bytes) -> bytes:
    """Derive a 256-bit key from fixed key material with HKDF-SHA256."""
    return HKDF(
        algorithm=hashes.SHA256(),
        length=KEY_SIZE,
        salt=salt,
        info=info,
    ).derive(secret.encode("utf-8"))


def stretch_key(passphrase: str, salt: bytes, iterations: int) -> bytes:
    """
    Derive a 256-bit key from an operator passphrase with PBKDF2-HMAC-SHA256.

    Args:
        passphrase: Operator-chosen secret
        salt: Per-store random salt
        iterations: PBKDF2 iteration count

    Returns:
        Raw key bytes
    """
    return PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_SIZE,
        salt=salt,
        iterations=iterations,
    ).derive(passphrase.encode("utf-8"))


def seal(key: bytes, plaintext: bytes) -> str:
    """Encrypt and return base64(nonce || ciphertext)."""
    nonce = os.urandom(NONCE_SIZE)
    ciphertext = AESGCM(key).encrypt(nonce, plaintext, None)
    return base64.b64encode(nonce + ciphertext).decode("ascii")


def open_token(key: bytes, token: str) -> bytes:
    """
    Decrypt a token produced by seal().

    Raises:
        KeystoreError: If the token is malformed or the key is wrong
    """
    try:
        raw = base64.b64decode(token.encode("ascii"), validate=True)
    except (ValueError, UnicodeEncodeError) as e:
        raise KeystoreError("Malformed encrypted value", context=str(e))
    if len(raw) <= NONCE_SIZE:
        raise KeystoreError("Malformed encrypted value")
    try:
        return AESGCM(key).decrypt(raw[:NONCE_SIZE], raw[NONCE_SIZE:], None)
    except InvalidTag:
        raise KeystoreError("Unable to decrypt value with the current master secret")
