"""App — coração do gateway: orquestração, casos de uso e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- use_cases/: orquestrador de requisições USSD
- ussd/: parser de input, fluxos multi-etapas e renderer CON/END
- services/: serviços de aplicação (sweep de sessões)
- infra/: implementações concretas de IO (Redis, Firestore, HTTP)
- protocols/: contratos/interfaces
- sessions/: entidade, rascunhos de fluxo, auditoria e gerenciador
- domain/: modelos de colheita, produto e crédito
- observability/: contexto de requisição e métricas via logs

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
