"""Verificação de credenciais (JWT)."""

from app.infra.auth.jwt_verifier import JwtTokenVerifier

__all__ = ["JwtTokenVerifier"]
