"""Núcleo do protocolo USSD: parser de input, fluxos e renderização."""
