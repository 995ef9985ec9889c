"""Connectors por canal — adapters de borda para sistemas externos.

Estrutura:
- chatwoot/: webhooks do Chatwoot

Cada canal tem seu próprio connector, garantindo SRP e isolamento de falhas.
"""

__all__: list[str] = []
