"""
Signal processing pipeline for single-channel brainwave captures.
"""

from brainscreen.signal_processing.buffer import BurstQueue
from brainscreen.signal_processing.feature_extraction import BandBiomarkerExtractor
from brainscreen.signal_processing.preprocessing import BandpassConditioner, clamp_outliers
from brainscreen.signal_processing.spectrum import (
    fft_radix2,
    relative_power_spectrum,
    windowed_spectrum,
)

__all__ = [
    "BurstQueue",
    "BandBiomarkerExtractor",
    "BandpassConditioner",
    "clamp_outliers",
    "fft_radix2",
    "relative_power_spectrum",
    "windowed_spectrum",
]
