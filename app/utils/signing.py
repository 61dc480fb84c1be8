"""HMAC request signing helpers."""

import hashlib
import hmac


def generate_hmac_signature(secret: str, payload: str, timestamp: str) -> str:
    """Hex SHA-256 HMAC of "{timestamp}.{payload}"."""
    data = f"{timestamp}.{payload}"
    return hmac.new(secret.encode(), data.encode(), hashlib.sha256).hexdigest()


def verify_hmac_signature(secret: str, payload: str, timestamp: str, signature: str) -> bool:
    """Constant-time check of a signature produced by generate_hmac_signature()."""
    expected = generate_hmac_signature(secret, payload, timestamp)
    return hmac.compare_digest(expected, signature)
