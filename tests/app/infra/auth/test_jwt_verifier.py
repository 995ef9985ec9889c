"""Testes do JwtTokenVerifier (PyJWT, HS256)."""

from __future__ import annotations

import time

import jwt
import pytest

from app.infra.auth import JwtTokenVerifier
from config.settings import AuthSettings
from utils.errors import AuthenticationError

SECRET = "test-secret-with-at-least-32-characters!"


def _token(claims: dict, secret: str = SECRET, algorithm: str = "HS256") -> str:
    return jwt.encode(claims, secret, algorithm=algorithm)


def _claims(**overrides) -> dict:
    claims = {
        "sub": "42",
        "abilities": ["lgpd:read", "conversations:read"],
        "exp": int(time.time()) + 600,
        "jti": "tok-1",
    }
    claims.update(overrides)
    return claims


class TestJwtTokenVerifier:
    def test_valid_token_returns_principal(self) -> None:
        verifier = JwtTokenVerifier(SECRET)

        principal = verifier.verify(_token(_claims()))

        assert principal.principal_id == "42"
        assert principal.abilities == frozenset({"lgpd:read", "conversations:read"})
        assert principal.token_id == "tok-1"
        assert principal.expires_at is not None
        assert principal.identity == "user:42"

    def test_space_separated_abilities(self) -> None:
        principal = JwtTokenVerifier(SECRET).verify(_token(_claims(abilities="lgpd:read admin:*")))

        assert principal.abilities == frozenset({"lgpd:read", "admin:*"})

    def test_user_id_claim_as_subject_fallback(self) -> None:
        claims = _claims(user_id=99)
        del claims["sub"]

        assert JwtTokenVerifier(SECRET).verify(_token(claims)).principal_id == "99"

    def test_expired_token(self) -> None:
        with pytest.raises(AuthenticationError) as exc_info:
            JwtTokenVerifier(SECRET).verify(_token(_claims(exp=int(time.time()) - 10)))

        assert exc_info.value.error_code == "TOKEN_EXPIRED"
        assert exc_info.value.status_code == 401

    def test_wrong_secret_is_unauthenticated(self) -> None:
        token = _token(_claims(), secret="another-secret-with-32-characters-long")

        with pytest.raises(AuthenticationError) as exc_info:
            JwtTokenVerifier(SECRET).verify(token)

        assert exc_info.value.error_code == "UNAUTHENTICATED"

    def test_garbage_token_is_malformed(self) -> None:
        with pytest.raises(AuthenticationError) as exc_info:
            JwtTokenVerifier(SECRET).verify("not-a-jwt")

        assert exc_info.value.error_code == "TOKEN_MALFORMED"

    def test_missing_exp_is_rejected(self) -> None:
        claims = _claims()
        del claims["exp"]

        with pytest.raises(AuthenticationError) as exc_info:
            JwtTokenVerifier(SECRET).verify(_token(claims))

        assert exc_info.value.error_code == "UNAUTHENTICATED"

    def test_missing_subject_is_rejected(self) -> None:
        claims = _claims()
        del claims["sub"]

        with pytest.raises(AuthenticationError):
            JwtTokenVerifier(SECRET).verify(_token(claims))

    def test_malformed_abilities_claim(self) -> None:
        with pytest.raises(AuthenticationError) as exc_info:
            JwtTokenVerifier(SECRET).verify(_token(_claims(abilities={"lgpd": True})))

        assert exc_info.value.error_code == "TOKEN_MALFORMED"

    def test_algorithm_not_allowed(self) -> None:
        token = _token(_claims(), algorithm="HS512")

        with pytest.raises(AuthenticationError):
            JwtTokenVerifier(SECRET, algorithm="HS256").verify(token)

    def test_issuer_and_audience_enforced_when_configured(self) -> None:
        verifier = JwtTokenVerifier(SECRET, issuer="krayin", audience="crm-bridge")

        ok = verifier.verify(_token(_claims(iss="krayin", aud="crm-bridge")))
        assert ok.principal_id == "42"

        with pytest.raises(AuthenticationError):
            verifier.verify(_token(_claims(iss="outro", aud="crm-bridge")))

    def test_from_settings(self) -> None:
        settings = AuthSettings(jwt_secret=SECRET, jwt_issuer="", jwt_audience="")

        verifier = JwtTokenVerifier.from_settings(settings)

        assert verifier.verify(_token(_claims())).principal_id == "42"
