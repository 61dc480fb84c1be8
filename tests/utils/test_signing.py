import hashlib
import hmac

from app.utils.signing import generate_hmac_signature, verify_hmac_signature


def test_signature_covers_timestamp_and_payload():
    expected = hmac.new(b"secret", b"1714564800.{\"id\":1}", hashlib.sha256).hexdigest()
    assert generate_hmac_signature("secret", '{"id":1}', "1714564800") == expected


def test_verify_accepts_own_signature():
    signature = generate_hmac_signature("secret", "body", "1714564800")
    assert verify_hmac_signature("secret", "body", "1714564800", signature)


def test_verify_rejects_tampering():
    signature = generate_hmac_signature("secret", "body", "1714564800")
    assert not verify_hmac_signature("secret", "body!", "1714564800", signature)
    assert not verify_hmac_signature("secret", "body", "1714564801", signature)
    assert not verify_hmac_signature("other", "body", "1714564800", signature)
