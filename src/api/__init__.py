"""API — camada de borda.

Responsabilidades:
- Receber requests HTTP (webhooks do Chatwoot e clientes da API)
- Validar payloads e normalizar dados de entrada
- Calcular identificadores de idempotência dos webhooks

Subpastas:
- connectors/: adapters por sistema externo
- validators/: validação de payloads
- routes/: endpoints HTTP e políticas de segurança por rota

NÃO PODE conter: regras de rate limit, verificação de assinatura ou tokens.
"""
