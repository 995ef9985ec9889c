"""App — coração da ponte: pipeline de segurança, serviços e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- domain/: tipos de segurança (políticas de rota, decisões, principal)
- services/: assinatura, replay, rate limit, auth e o pipeline
- infra/: stores (memória/Redis), verificador JWT e dispatcher
- protocols/: contratos/interfaces dos colaboradores
- observability/: request_id, redação e métricas

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
