"""
Capture processing pipeline components.
"""

from brainscreen.pipeline.acquisition import AcquisitionSession
from brainscreen.pipeline.spectral_pipeline import BrainwaveProcessResult, SpectralPipeline

__all__ = [
    "AcquisitionSession",
    "BrainwaveProcessResult",
    "SpectralPipeline",
]
