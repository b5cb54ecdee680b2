"""API — camada de borda HTTP.

Responsabilidades:
- Receber requests HTTP e validar payloads
- Normalizar destinatários para o formato JID
- Construir o conteúdo das mensagens para o cliente de protocolo

Subpastas:
- normalizers/: identificadores externos → JID
- payload_builders/: conteúdo de mensagens (texto, menção, lista)
- routes/: endpoints HTTP (instâncias, health)

NÃO PODE conter: FSM, regras de reconexão, acesso ao store de status.
"""
