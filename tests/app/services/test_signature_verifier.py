"""Testes da verificação HMAC dos webhooks do Chatwoot."""

from __future__ import annotations

import hashlib
import hmac

import pytest

from app.domain.security import SignatureFailure, SignedWebhookEnvelope
from app.services.signature_verifier import (
    compute_signature,
    signature_error,
    verify,
    verify_envelope,
)

SECRET = "chatwoot-webhook-secret"
NOW = 1_700_000_000
BODY = b'{"event":"message_created","id":123,"account_id":1}'


def _signed(body: bytes = BODY, timestamp: int = NOW, secret: str = SECRET) -> tuple[str, str]:
    return compute_signature(body, timestamp, secret), str(timestamp)


class TestComputeSignature:
    def test_uses_timestamp_dot_body_as_canonical_string(self) -> None:
        expected = hmac.new(
            SECRET.encode(), f"{NOW}.".encode() + BODY, hashlib.sha256
        ).hexdigest()

        assert compute_signature(BODY, NOW, SECRET) == f"sha256={expected}"


class TestVerify:
    def test_valid_signature_passes(self) -> None:
        signature, timestamp = _signed()

        result = verify(BODY, signature, timestamp, SECRET, 300, now=NOW + 10)

        assert result.ok is True
        assert result.failure is None

    def test_bare_hex_signature_is_accepted(self) -> None:
        signature, timestamp = _signed()
        bare = signature.removeprefix("sha256=")

        assert verify(BODY, bare, timestamp, SECRET, 300, now=NOW).ok is True

    @pytest.mark.parametrize(
        "mutated",
        [
            BODY.replace(b"123", b"124"),
            BODY + b" ",
            b'{"account_id":1,"event":"message_created","id":123}',
        ],
    )
    def test_any_body_change_breaks_signature(self, mutated: bytes) -> None:
        """Corpo re-serializado ou alterado em um byte não confere."""
        signature, timestamp = _signed()

        result = verify(mutated, signature, timestamp, SECRET, 300, now=NOW)

        assert result.failure == SignatureFailure.SIGNATURE_MISMATCH

    def test_wrong_secret_is_mismatch(self) -> None:
        signature, timestamp = _signed(secret="outro-secret")

        result = verify(BODY, signature, timestamp, SECRET, 300, now=NOW)

        assert result.failure == SignatureFailure.SIGNATURE_MISMATCH

    @pytest.mark.parametrize("skew", [301, -301, 86400])
    def test_stale_timestamp_rejected_even_with_valid_signature(self, skew: int) -> None:
        signature, timestamp = _signed()

        result = verify(BODY, signature, timestamp, SECRET, 300, now=NOW + skew)

        assert result.failure == SignatureFailure.STALE_TIMESTAMP

    def test_timestamp_at_tolerance_edge_is_accepted(self) -> None:
        signature, timestamp = _signed()

        assert verify(BODY, signature, timestamp, SECRET, 300, now=NOW + 300).ok is True

    @pytest.mark.parametrize(
        ("signature", "timestamp"),
        [(None, str(NOW)), ("sha256=abc", None), ("", str(NOW)), ("sha256=abc", "")],
    )
    def test_missing_headers(self, signature: str | None, timestamp: str | None) -> None:
        result = verify(BODY, signature, timestamp, SECRET, 300, now=NOW)

        assert result.failure == SignatureFailure.MISSING_HEADER

    @pytest.mark.parametrize(
        "timestamp", ["abc", "1700000000.5", "-1700000000", "17e8", "²", "١٢٣"]
    )
    def test_non_integer_timestamp_is_invalid(self, timestamp: str) -> None:
        result = verify(BODY, "sha256=abc", timestamp, SECRET, 300, now=NOW)

        assert result.failure == SignatureFailure.INVALID_TIMESTAMP

    def test_missing_secret_fails_before_anything_else(self) -> None:
        result = verify(BODY, None, None, "", 300, now=NOW)

        assert result.failure == SignatureFailure.SECRET_NOT_CONFIGURED

    def test_verify_envelope_reads_envelope_fields(self) -> None:
        signature, timestamp = _signed()
        envelope = SignedWebhookEnvelope(raw_body=BODY, signature=signature, timestamp=timestamp)

        assert verify_envelope(envelope, SECRET, 300, now=NOW).ok is True


class TestSignatureError:
    @pytest.mark.parametrize(
        ("failure", "status_code"),
        [
            (SignatureFailure.MISSING_HEADER, 401),
            (SignatureFailure.INVALID_TIMESTAMP, 400),
            (SignatureFailure.STALE_TIMESTAMP, 401),
            (SignatureFailure.SIGNATURE_MISMATCH, 401),
            (SignatureFailure.SECRET_NOT_CONFIGURED, 500),
        ],
    )
    def test_maps_failure_to_status_and_error_code(
        self, failure: SignatureFailure, status_code: int
    ) -> None:
        error = signature_error(failure)

        assert error.status_code == status_code
        assert error.error_code == failure.value

    def test_mismatch_message(self) -> None:
        assert signature_error(SignatureFailure.SIGNATURE_MISMATCH).message == "Invalid signature"
