"""
Risk scoring and grip strength normalization.
"""

from brainscreen.scoring.grip_strength import (
    GripStrengthInterpolator,
    evaluate_grip_strength,
    grip_strength_percentage,
    grip_strength_score,
)
from brainscreen.scoring.grip_tables import GRIP_STRENGTH_TABLE, Gender, PercentileRow
from brainscreen.scoring.risk import (
    RISK_FORMULA_VERSION,
    assess_risk,
    compute_risk_score,
    final_index_from_bands,
)

__all__ = [
    "GripStrengthInterpolator",
    "evaluate_grip_strength",
    "grip_strength_percentage",
    "grip_strength_score",
    "GRIP_STRENGTH_TABLE",
    "Gender",
    "PercentileRow",
    "RISK_FORMULA_VERSION",
    "assess_risk",
    "compute_risk_score",
    "final_index_from_bands",
]
