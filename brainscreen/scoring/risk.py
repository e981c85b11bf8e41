"""
Cognitive risk scoring.

This module is the single definition of the combined brainwave index and
of the risk formula. The pipeline and any downstream consumer that
recomputes risk from stored values (e.g. a record-persistence service
holding theta/alpha/beta and scale scores) must call these functions.
"""

import math
from typing import Optional

from brainscreen.core.exceptions import ValidationError
from brainscreen.core.logging import get_logger
from brainscreen.data.schemas import RiskAssessment

logger = get_logger(__name__)

RISK_FORMULA_VERSION = "1"

# MoCA and MMSE are both scored out of 30
SCALE_MAX_SCORE = 30.0


def clamp_percent(value: float) -> float:
    """Clamp to [0, 100]."""
    return max(0.0, min(100.0, value))


def final_index_from_bands(theta: float, alpha: float, beta: float) -> float:
    """Brainwave final index: mean of the three band indices."""
    return (theta + alpha + beta) / 3.0


def normalize_scale_score(score: float) -> float:
    """
    Map a 0-30 cognitive scale score onto 0-100.

    Raises:
        ValidationError: If the score is outside 0-30 or not finite
    """
    if not math.isfinite(score) or not 0.0 <= score <= SCALE_MAX_SCORE:
        raise ValidationError(
            f"Cognitive scale score must be between 0 and {SCALE_MAX_SCORE:g}, got {score}"
        )
    return score / SCALE_MAX_SCORE * 100.0


def normalized_scale_average(
    moca: Optional[float] = None,
    mmse: Optional[float] = None
) -> float:
    """Average of whichever normalized scale scores are present (0 if none)."""
    present = [normalize_scale_score(s) for s in (mmse, moca) if s is not None]
    if not present:
        return 0.0
    return sum(present) / len(present)


def compute_risk_score(
    final_index: float,
    moca: Optional[float] = None,
    mmse: Optional[float] = None
) -> float:
    """
    Risk = final_index / 2 + normalized scale average / 2, clamped to [0, 100].

    Args:
        final_index: Brainwave final index (0-100)
        moca: MoCA score (0-30), optional
        mmse: MMSE score (0-30), optional

    Returns:
        Risk score in [0, 100]
    """
    if not math.isfinite(final_index):
        raise ValidationError(f"Brainwave final index must be finite, got {final_index}")

    average = normalized_scale_average(moca=moca, mmse=mmse)
    return clamp_percent(final_index / 2.0 + average / 2.0)


def assess_risk(
    final_index: float,
    moca: Optional[float] = None,
    mmse: Optional[float] = None
) -> RiskAssessment:
    """Compute the risk score and return it with its inputs."""
    average = normalized_scale_average(moca=moca, mmse=mmse)
    risk = compute_risk_score(final_index, moca=moca, mmse=mmse)

    logger.info(
        "risk_assessed",
        final_index=final_index,
        scales_present=sum(s is not None for s in (moca, mmse)),
        risk_score=risk
    )

    return RiskAssessment(
        final_index=clamp_percent(final_index),
        moca=moca,
        mmse=mmse,
        normalized_scale_average=average,
        risk_score=risk,
        formula_version=RISK_FORMULA_VERSION,
    )
