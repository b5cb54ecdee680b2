"""App — coração do sistema: orquestração, casos de uso e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- sessions/: gerenciador de conexões, eventos e modelos de instância
- use_cases/: mensagens, grupos e contatos via handle vivo
- infra/: implementações concretas de IO (PostgreSQL, credenciais, QR)
- protocols/: contratos/interfaces
- observability/: correlation_id e log de requisições

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
