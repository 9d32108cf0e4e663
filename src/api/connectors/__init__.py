"""Connectors por canal — adapters de borda para APIs externas.

Estrutura:
- ussd/: webhook do agregador de telecom (Africa's Talking ou compatível)
"""

__all__: list[str] = []
