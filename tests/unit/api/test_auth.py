"""Unit tests for caller identity and webhook signatures"""

import hashlib
import hmac
import time
import jwt
import pytest

from economy.api.auth import Principal, decode_token, verify_webhook_signature
from economy.api.error import ClientError

SECRET = "test-secret"


def make_token(claims, secret=SECRET):
    return jwt.encode(claims, secret, algorithm="HS256")


class TestDecodeToken:

    def test_role_from_app_metadata(self):
        token = make_token({"sub": "user_1", "aud": "authenticated", "app_metadata": {"role": "ADMIN"}})

        principal = decode_token(token, SECRET, "authenticated")

        assert principal == Principal(user_id="user_1", role="admin")
        assert principal.is_admin

    def test_top_level_role_fallback(self):
        token = make_token({"sub": "user_2", "role": "author"})

        principal = decode_token(token, SECRET)

        assert principal.role == "author"
        assert not principal.is_admin

    def test_unknown_role_becomes_reader(self):
        token = make_token({"sub": "user_3", "role": "superuser"})

        assert decode_token(token, SECRET).role == "reader"

    def test_wrong_secret_is_rejected(self):
        token = make_token({"sub": "user_1"}, secret="other")

        with pytest.raises(ClientError) as exc_info:
            decode_token(token, SECRET)

        assert exc_info.value.error.code == "UNAUTHENTICATED"
        assert exc_info.value.status_code == 401

    def test_expired_token_is_rejected(self):
        token = make_token({"sub": "user_1", "exp": int(time.time()) - 60})

        with pytest.raises(ClientError):
            decode_token(token, SECRET)

    def test_wrong_audience_is_rejected(self):
        token = make_token({"sub": "user_1", "aud": "anon"})

        with pytest.raises(ClientError):
            decode_token(token, SECRET, "authenticated")

    def test_missing_subject_is_rejected(self):
        token = make_token({"role": "admin"})

        with pytest.raises(ClientError) as exc_info:
            decode_token(token, SECRET)

        assert "subject" in exc_info.value.error.message


class TestWebhookSignature:

    def test_valid_signature(self):
        body = b'{"type": "payment_intent.succeeded"}'
        signature = hmac.new(b"whsec", body, hashlib.sha256).hexdigest()

        assert verify_webhook_signature(body, signature, "whsec")

    def test_tampered_body(self):
        signature = hmac.new(b"whsec", b"original", hashlib.sha256).hexdigest()

        assert not verify_webhook_signature(b"tampered", signature, "whsec")

    def test_missing_signature_or_secret(self):
        assert not verify_webhook_signature(b"{}", None, "whsec")
        assert not verify_webhook_signature(b"{}", "abc", "")
