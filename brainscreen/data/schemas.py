"""
Result schemas handed to report-rendering and record-persistence collaborators.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BandResult(BaseModel):
    """Spectral band biomarkers for one capture."""

    model_config = ConfigDict(frozen=True)

    theta: float = Field(ge=0.0, le=100.0)
    alpha: float = Field(ge=0.0, le=100.0)
    beta: float = Field(ge=0.0, le=100.0)
    final_index: float = Field(ge=0.0, le=100.0)


class RiskAssessment(BaseModel):
    """Risk score together with the evidence it was computed from."""

    model_config = ConfigDict(frozen=True)

    final_index: float = Field(ge=0.0, le=100.0)
    moca: Optional[float] = None
    mmse: Optional[float] = None
    normalized_scale_average: float = Field(ge=0.0, le=100.0)
    risk_score: float = Field(ge=0.0, le=100.0)
    formula_version: str


class GripStrengthResult(BaseModel):
    """Age/gender-normalized grip strength."""

    model_config = ConfigDict(frozen=True)

    percentage: float = Field(ge=0.0, le=100.0)
    score: float = Field(ge=0.0, le=100.0)
