"""
Raw sample sources and simulator.
"""

from brainscreen.eeg.device_interface import SampleSource
from brainscreen.eeg.simulator import SyntheticSampleSource

__all__ = [
    "SampleSource",
    "SyntheticSampleSource",
]
