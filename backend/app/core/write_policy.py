"""Write Authorizer - delegated signature check against the owner's public key.

Invariants:
    - Precedence: no owner -> 403; corrupt stored key -> 500; no signature -> 403;
      bad signature -> 403; otherwise allowed
    - Digest is SHA-256 over the exact received bytes, never a re-serialization
    - Signature scheme is RSA PKCS#1 v1.5

Design Decisions:
    - Raises typed errors (ForbiddenError.reason tells the failure kinds apart)
    - Stored keys may be PKCS#1 RSAPublicKey or SubjectPublicKeyInfo DER, base64 encoded
"""

import base64
import binascii

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from app.core.errors import ForbiddenError, StoredIdentityError


def load_public_key(encoded_key: str) -> rsa.RSAPublicKey:
    """Decode a stored base64 DER public key. Failures are the store's fault."""
    try:
        der = base64.b64decode(encoded_key, validate=True)
    except (binascii.Error, ValueError) as e:
        raise StoredIdentityError("public key is not valid base64") from e
    try:
        key = serialization.load_der_public_key(der)
    except (ValueError, UnsupportedAlgorithm) as e:
        raise StoredIdentityError("public key is not valid DER") from e
    if not isinstance(key, rsa.RSAPublicKey):
        raise StoredIdentityError("public key is not an RSA key")
    return key


def authorize_write(
    owner_key: str | None, payload: bytes, signature: str | None,
) -> None:
    """Allow the write or raise. owner_key is None when no owner was resolved."""
    if owner_key is None:
        raise ForbiddenError(ForbiddenError.OWNER_MISSING)
    public_key = load_public_key(owner_key)
    if not signature:
        raise ForbiddenError(ForbiddenError.SIGNATURE_MISSING)
    try:
        raw_signature = base64.b64decode(signature.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ForbiddenError(ForbiddenError.SIGNATURE_INVALID) from e
    try:
        public_key.verify(
            raw_signature, payload, padding.PKCS1v15(), hashes.SHA256(),
        )
    except InvalidSignature as e:
        raise ForbiddenError(ForbiddenError.SIGNATURE_INVALID) from e
