"""
Band biomarker extraction from a relative power spectrum.

Extracts:
- Theta index (4-7 Hz)
- Alpha index (8-13 Hz)
- Beta index (15-25 Hz)
- Final index (mean of the three)
"""

from typing import Callable, Dict, Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

from brainscreen.core.exceptions import ValidationError
from brainscreen.core.logging import get_logger
from brainscreen.data.schemas import BandResult
from brainscreen.scoring.risk import clamp_percent, final_index_from_bands
from brainscreen.signal_processing.spectrum import band_slice

logger = get_logger(__name__)

# Frequency bands (Hz)
BANDS: Dict[str, Tuple[float, float]] = {
    'theta': (4.0, 7.0),
    'alpha': (8.0, 13.0),
    'beta': (15.0, 25.0),
}


def theta_index(peak_fraction: float) -> float:
    """Theta = [max Rel P - 2] * 100%"""
    return clamp_percent((peak_fraction - 2.0) * 100.0)


def alpha_index(peak_fraction: float) -> float:
    """Alpha = 100% - [max Rel P + 0.3] * 100%"""
    return clamp_percent(100.0 - (peak_fraction + 0.3) * 100.0)


def beta_index(peak_fraction: float) -> float:
    """Beta = 100% - [max Rel P + 0.5] * 100%"""
    return clamp_percent(100.0 - (peak_fraction + 0.5) * 100.0)


BAND_FORMULAS: Dict[str, Callable[[float], float]] = {
    'theta': theta_index,
    'alpha': alpha_index,
    'beta': beta_index,
}


class BandBiomarkerExtractor:
    """
    Derive theta/alpha/beta indices from a relative power spectrum.

    For each band the peak relative power (percent) inside the band's bin
    range is converted to a fraction and fed through the band formula.
    Every index is clamped to [0, 100].
    """

    def __init__(self, bands: Dict[str, Tuple[float, float]] = BANDS) -> None:
        missing = set(BAND_FORMULAS) - set(bands)
        if missing:
            raise ValueError(f"Band ranges missing for: {sorted(missing)}")
        self.bands = dict(bands)

    def band_peak(self, relative_power: NDArray[np.float64], band_name: str) -> float:
        """
        Maximum relative power (percent) inside a band.

        Raises:
            ValidationError: If the band's bin range is empty
        """
        low_freq, high_freq = self.bands[band_name]
        values = relative_power[band_slice(relative_power.shape[0], low_freq, high_freq)]

        if values.size == 0:
            raise ValidationError(
                f"No spectrum bins available for {band_name} band "
                f"({low_freq}-{high_freq} Hz)"
            )

        return float(np.max(values))

    def extract(self, relative_power: ArrayLike) -> BandResult:
        """
        Extract band indices.

        Args:
            relative_power: Relative power spectrum in percent

        Returns:
            BandResult with theta, alpha, beta and final_index
        """
        spectrum = np.asarray(relative_power, dtype=np.float64)

        indices = {
            name: formula(self.band_peak(spectrum, name) / 100.0)
            for name, formula in BAND_FORMULAS.items()
        }

        result = BandResult(
            theta=indices['theta'],
            alpha=indices['alpha'],
            beta=indices['beta'],
            final_index=final_index_from_bands(
                indices['theta'], indices['alpha'], indices['beta']
            ),
        )

        logger.debug(
            "band_biomarkers_extracted",
            theta=result.theta,
            alpha=result.alpha,
            beta=result.beta,
            final_index=result.final_index
        )

        return result
