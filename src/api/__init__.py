"""API — camada de borda do gateway USSD.

Responsabilidades:
- Receber requests do agregador de telecom
- Validar payloads (form-encoded ou JSON)
- Normalizar dados para modelos internos
- Serializar a resposta no formato esperado pelo agregador

Subpastas:
- connectors/: parse e validação por canal
- routes/: endpoints HTTP (ussd, health)

NÃO PODE conter: FSM, regras de sessão, orquestração de use cases.
"""
