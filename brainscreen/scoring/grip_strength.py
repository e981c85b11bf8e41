"""
Grip strength percentile interpolation.

Converts a grip strength measurement (kg) into an age/gender-normalized
population percentile and a risk score (100 - percentile).
"""

import math
from typing import Mapping, Optional, Tuple

from brainscreen.core.exceptions import ValidationError
from brainscreen.core.logging import get_logger
from brainscreen.data.schemas import GripStrengthResult
from brainscreen.scoring.grip_tables import GRIP_STRENGTH_TABLE, Gender, PercentileRow

logger = get_logger(__name__)

# Returned when no age bracket matches
FALLBACK_PERCENTILE = 50.0

# Values this close to an anchor snap to the anchor's percentile
ANCHOR_TOLERANCE = 0.01

_GENDER_ALIASES = {
    "male": Gender.MALE,
    "m": Gender.MALE,
    "男": Gender.MALE,
    "female": Gender.FEMALE,
    "f": Gender.FEMALE,
    "女": Gender.FEMALE,
}


def parse_gender(tag: str | Gender) -> Gender:
    """
    Resolve a gender tag.

    Raises:
        ValidationError: If the tag is not recognized
    """
    if isinstance(tag, Gender):
        return tag
    gender = _GENDER_ALIASES.get(str(tag).strip().lower())
    if gender is None:
        raise ValidationError(f"Unrecognized gender tag: {tag!r}")
    return gender


class GripStrengthInterpolator:
    """
    Piecewise-linear percentile lookup over a reference table.
    """

    def __init__(
        self,
        table: Mapping[Gender, Tuple[PercentileRow, ...]] = GRIP_STRENGTH_TABLE
    ) -> None:
        self.table = table

    def find_row(self, gender: str | Gender, age: float) -> Optional[PercentileRow]:
        """Reference row whose closed age bracket covers ``age``."""
        for row in self.table.get(parse_gender(gender), ()):
            if row.covers(age):
                return row
        return None

    def percentile(self, value: float, gender: str | Gender, age: float) -> float:
        """
        Population percentile of a grip strength value.

        Args:
            value: Grip strength in kg
            gender: Gender tag
            age: Age in years

        Returns:
            Percentile in [10, 100], or 50 when the age is outside every bracket
        """
        if not math.isfinite(value):
            raise ValidationError(f"Grip strength must be finite, got {value}")

        row = self.find_row(gender, age)
        if row is None:
            logger.warning(
                "grip_strength_bracket_not_found",
                gender=parse_gender(gender).value,
                age=age,
                fallback=FALLBACK_PERCENTILE
            )
            return FALLBACK_PERCENTILE

        lowest_percentile, lowest_value = row.lowest
        highest_percentile, highest_value = row.highest

        if value < lowest_value:
            return lowest_percentile
        if value >= highest_value:
            return highest_percentile

        for anchor_percentile, anchor_value in row.anchors:
            if abs(value - anchor_value) < ANCHOR_TOLERANCE:
                return anchor_percentile

        for (p_low, v_low), (p_high, v_high) in zip(row.anchors, row.anchors[1:]):
            if v_low <= value < v_high:
                return p_low + (value - v_low) / (v_high - v_low) * (p_high - p_low)

        # Unreachable for well-formed rows
        return FALLBACK_PERCENTILE

    def score(self, value: float, gender: str | Gender, age: float) -> float:
        """Grip strength score: 100 - percentile (higher means more risk)."""
        return 100.0 - self.percentile(value, gender, age)

    def evaluate(self, value: float, gender: str | Gender, age: float) -> GripStrengthResult:
        percentage = self.percentile(value, gender, age)
        return GripStrengthResult(percentage=percentage, score=100.0 - percentage)


_default_interpolator = GripStrengthInterpolator()


def grip_strength_percentage(value: float, gender: str | Gender, age: float) -> float:
    return _default_interpolator.percentile(value, gender, age)


def grip_strength_score(value: float, gender: str | Gender, age: float) -> float:
    return _default_interpolator.score(value, gender, age)


def evaluate_grip_strength(value: float, gender: str | Gender, age: float) -> GripStrengthResult:
    return _default_interpolator.evaluate(value, gender, age)
