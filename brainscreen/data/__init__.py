"""
Data management - result schemas and EDF biosignal recording.
"""

from brainscreen.data.recorder import (
    BiosignalRecorder,
    EdfHeader,
    RecorderState,
    SignalSpec,
    read_header,
    read_physical_samples,
    read_samples,
)
from brainscreen.data.schemas import BandResult, GripStrengthResult, RiskAssessment

__all__ = [
    "BiosignalRecorder",
    "EdfHeader",
    "RecorderState",
    "SignalSpec",
    "read_header",
    "read_physical_samples",
    "read_samples",
    "BandResult",
    "GripStrengthResult",
    "RiskAssessment",
]
