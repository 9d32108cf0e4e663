"""Adaptador de saída para o agregador de telecom."""

from app.infra.aggregator.http_sender import HttpAggregatorSender

__all__ = ["HttpAggregatorSender"]
