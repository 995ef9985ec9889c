"""Rotas de webhook do Chatwoot."""
