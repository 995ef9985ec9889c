"""Rotas protegidas por bearer token (JWT + abilities)."""
