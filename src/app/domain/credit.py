"""Modelos de dominio para verificacao de identidade e score de credito."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, computed_field


class VerificationOutcome(StrEnum):
    """Resultado da verificacao de BVN."""

    VERIFIED = "verified"
    PENDING = "pending"
    MANUAL_REVIEW = "manual_review"


def rating_for_score(score: int) -> str:
    """Classifica o score de credito."""
    if score >= 700:
        return "Excellent"
    if score >= 600:
        return "Good"
    if score >= 500:
        return "Fair"
    return "Poor"


class CreditScore(BaseModel):
    """Score de credito retornado pelo provedor."""

    model_config = ConfigDict(extra="ignore")

    score: int = Field(..., ge=0, le=1000, description="Score numerico.")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def rating(self) -> str:
        return rating_for_score(self.score)
