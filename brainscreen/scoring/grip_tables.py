"""
Grip strength reference tables (kg) by gender and age bracket.

Each row maps population percentiles to the grip strength at that
percentile. Anchors ascend in both percentile and value. The tables are
immutable module-level data.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple

PERCENTILES: Tuple[float, ...] = (
    10.0, 30.0, 50.0, 55.0, 60.0, 65.0, 70.0, 75.0, 80.0, 85.0, 90.0, 95.0, 100.0
)


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


@dataclass(frozen=True)
class PercentileRow:
    """One age bracket (closed interval) of the reference table."""

    min_age: int
    max_age: int
    gender: Gender
    anchors: Tuple[Tuple[float, float], ...]  # (percentile, value) pairs

    def covers(self, age: float) -> bool:
        return self.min_age <= age <= self.max_age

    @property
    def lowest(self) -> Tuple[float, float]:
        return self.anchors[0]

    @property
    def highest(self) -> Tuple[float, float]:
        return self.anchors[-1]


def _row(min_age: int, max_age: int, gender: Gender, *values: float) -> PercentileRow:
    if len(values) != len(PERCENTILES):
        raise ValueError(
            f"Expected {len(PERCENTILES)} anchor values for {gender.value} "
            f"{min_age}-{max_age}, got {len(values)}"
        )
    return PercentileRow(min_age, max_age, gender, tuple(zip(PERCENTILES, values)))


_F = Gender.FEMALE
_M = Gender.MALE

FEMALE_ROWS: Tuple[PercentileRow, ...] = (
    _row(20, 24, _F, 17.3, 18.3, 21.1, 22.9, 24.3, 25.6, 26.9, 28.3, 29.9, 32.0, 33.4, 35.7, 35.8),
    _row(25, 29, _F, 17.3, 18.3, 21.2, 22.9, 24.3, 25.6, 26.9, 28.2, 29.8, 31.9, 33.3, 35.5, 35.6),
    _row(30, 34, _F, 17.5, 18.6, 21.5, 23.3, 24.7, 26.0, 27.3, 28.6, 30.2, 32.2, 33.7, 35.9, 36.0),
    _row(35, 39, _F, 17.6, 18.6, 21.7, 23.5, 24.9, 26.2, 27.5, 28.8, 30.4, 32.4, 33.8, 35.9, 36.0),
    _row(40, 44, _F, 17.6, 18.7, 21.8, 23.7, 25.1, 26.4, 27.7, 29.0, 30.5, 32.5, 33.9, 36.1, 36.2),
    _row(45, 49, _F, 17.4, 18.5, 21.5, 23.3, 24.7, 25.6, 26.9, 28.6, 30.1, 32.1, 33.5, 35.7, 35.8),
    _row(50, 54, _F, 16.8, 17.8, 20.7, 22.4, 23.8, 25.1, 26.3, 27.6, 29.1, 31.1, 32.5, 34.8, 34.9),
    _row(55, 59, _F, 16.0, 17.1, 20.0, 21.8, 23.2, 24.4, 25.6, 26.9, 28.4, 30.5, 31.9, 34.1, 34.2),
    _row(60, 64, _F, 14.5, 15.5, 18.5, 20.3, 21.7, 22.9, 24.0, 25.3, 26.7, 28.6, 30.0, 32.1, 32.2),
    _row(65, 69, _F, 13.4, 14.5, 17.6, 19.4, 20.8, 22.0, 23.2, 24.4, 25.9, 27.8, 29.2, 31.3, 31.4),
    _row(70, 74, _F, 12.2, 13.3, 16.3, 18.1, 19.5, 20.7, 21.9, 23.2, 24.6, 26.6, 28.0, 30.3, 30.4),
    _row(75, 999, _F, 11.5, 12.5, 15.6, 17.4, 18.8, 20.0, 21.2, 22.5, 24.1, 26.2, 27.7, 30.2, 30.3),
)

MALE_ROWS: Tuple[PercentileRow, ...] = (
    _row(20, 24, _M, 29.0, 30.7, 35.5, 38.3, 40.4, 42.4, 44.2, 46.2, 48.4, 51.4, 53.5, 56.6, 56.7),
    _row(25, 29, _M, 29.6, 31.4, 36.2, 39.1, 41.3, 43.2, 45.1, 47.1, 49.4, 52.4, 54.4, 57.6, 57.7),
    _row(30, 34, _M, 29.9, 31.7, 36.5, 39.3, 41.5, 43.5, 45.4, 47.3, 49.6, 52.5, 54.6, 57.7, 57.8),
    _row(35, 39, _M, 29.6, 31.4, 36.2, 38.9, 41.1, 43.1, 44.9, 46.9, 49.1, 51.9, 53.9, 56.9, 57.0),
    _row(40, 44, _M, 29.3, 31.1, 35.8, 38.6, 40.8, 42.7, 44.5, 46.5, 48.6, 51.5, 53.4, 56.3, 56.4),
    _row(45, 49, _M, 28.9, 30.6, 35.3, 38.0, 40.1, 42.0, 43.8, 45.8, 47.9, 50.7, 52.6, 55.5, 55.6),
    _row(50, 54, _M, 28.1, 29.7, 34.2, 36.9, 39.0, 40.8, 42.6, 44.5, 46.7, 49.5, 51.4, 54.4, 54.5),
    _row(55, 59, _M, 26.2, 27.8, 32.3, 35.0, 37.1, 39.0, 40.8, 42.7, 44.9, 47.7, 49.6, 52.6, 52.7),
    _row(60, 64, _M, 22.8, 24.5, 29.1, 31.8, 33.9, 35.8, 37.6, 39.5, 41.6, 44.3, 46.1, 48.9, 49.0),
    _row(65, 69, _M, 20.8, 22.5, 27.2, 30.0, 32.1, 34.0, 35.9, 37.8, 39.9, 42.7, 44.5, 47.3, 47.4),
    _row(70, 74, _M, 18.3, 20.0, 24.5, 27.2, 29.3, 31.2, 33.0, 35.0, 37.1, 39.9, 41.8, 44.6, 44.7),
    _row(75, 999, _M, 16.0, 17.5, 21.9, 24.6, 26.7, 28.6, 30.5, 32.4, 34.6, 37.5, 39.4, 42.3, 42.4),
)

GRIP_STRENGTH_TABLE: Mapping[Gender, Tuple[PercentileRow, ...]] = MappingProxyType({
    Gender.FEMALE: FEMALE_ROWS,
    Gender.MALE: MALE_ROWS,
})
