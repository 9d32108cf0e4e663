"""Fluxos multi-etapas disparados pelos nós FLOW da árvore de menus."""

from app.ussd.flows.base import (
    FieldFlow,
    FieldValidationError,
    FlowContext,
    FlowHandler,
    FlowOutcome,
    FlowStatus,
)
from app.ussd.flows.credit import CheckCreditFlow
from app.ussd.flows.harvest import LogHarvestFlow, ViewHarvestsFlow
from app.ussd.flows.products import BrowseProductsFlow
from app.ussd.flows.registry import FlowRegistry
from app.ussd.flows.support import ContactSupportFlow, FaqFlow

__all__ = [
    "BrowseProductsFlow",
    "CheckCreditFlow",
    "ContactSupportFlow",
    "FaqFlow",
    "FieldFlow",
    "FieldValidationError",
    "FlowContext",
    "FlowHandler",
    "FlowOutcome",
    "FlowRegistry",
    "FlowStatus",
    "LogHarvestFlow",
    "ViewHarvestsFlow",
]
