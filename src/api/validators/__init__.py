"""Validators por canal — validação de payloads de entrada.

Estrutura:
- chatwoot/: eventos de webhook, consentimento LGPD e exportação

Cada canal tem seus próprios validators, garantindo SRP e isolamento de falhas.
"""

__all__: list[str] = []
