"""
Batch spectral pipeline for one brainwave capture.

Raw samples -> Outlier Clamp -> Bandpass Conditioner -> Windowed FFT ->
Relative Power -> Band Biomarkers (-> Risk Score).
"""

import time
from dataclasses import dataclass, field
from typing import Dict, Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray

from brainscreen.core.exceptions import BrainScreenError, NumericError, ValidationError
from brainscreen.core.logging import get_logger
from brainscreen.data.schemas import BandResult, RiskAssessment
from brainscreen.scoring.risk import assess_risk
from brainscreen.signal_processing.feature_extraction import BandBiomarkerExtractor
from brainscreen.signal_processing.preprocessing import BandpassConditioner, clamp_outliers
from brainscreen.signal_processing.spectrum import relative_power_spectrum, windowed_spectrum

logger = get_logger(__name__)


@dataclass
class BrainwaveProcessResult:
    """
    Outcome of processing one capture.

    Attributes:
        success: False when the capture was rejected or processing failed
        error_message: Reason for failure (empty on success)
        theta, alpha, beta, final_index: Band biomarkers (0 on failure)
        conditioned: Clamped and filtered samples
        spectrum: Complex windowed spectrum
        relative_power: Relative power per bin (percent)
        risk: Risk assessment, when scale scores were supplied to ``assess``
    """
    success: bool
    error_message: str = ""
    theta: float = 0.0
    alpha: float = 0.0
    beta: float = 0.0
    final_index: float = 0.0
    conditioned: NDArray[np.float64] = field(default_factory=lambda: np.zeros(0))
    spectrum: NDArray[np.complex128] = field(default_factory=lambda: np.zeros(0, dtype=np.complex128))
    relative_power: NDArray[np.float64] = field(default_factory=lambda: np.zeros(0))
    risk: Optional[RiskAssessment] = None

    @classmethod
    def failed(cls, message: str) -> "BrainwaveProcessResult":
        return cls(success=False, error_message=message)

    @property
    def bands(self) -> BandResult:
        """Band biomarkers as a result schema."""
        if not self.success:
            raise ValidationError(f"No band result for a failed capture: {self.error_message}")
        return BandResult(
            theta=self.theta,
            alpha=self.alpha,
            beta=self.beta,
            final_index=self.final_index,
        )

    def to_dict(self, include_series: bool = False) -> Dict:
        """Convert to dictionary for JSON serialization."""
        data: Dict = {
            'success': self.success,
            'error_message': self.error_message,
            'theta': float(self.theta),
            'alpha': float(self.alpha),
            'beta': float(self.beta),
            'final_index': float(self.final_index),
        }
        if self.risk is not None:
            data['risk'] = self.risk.model_dump()
        if include_series:
            data['conditioned'] = self.conditioned.tolist()
            data['spectrum'] = {
                'real': self.spectrum.real.tolist(),
                'imag': self.spectrum.imag.tolist(),
            }
            data['relative_power'] = self.relative_power.tolist()
        return data


class SpectralPipeline:
    """
    Derives band biomarkers from a complete capture.

    Every call processes one bounded batch synchronously. Validation and
    numeric failures never escape ``process``: they come back as a failed
    ``BrainwaveProcessResult`` carrying the error message.
    """

    def __init__(
        self,
        conditioner: Optional[BandpassConditioner] = None,
        extractor: Optional[BandBiomarkerExtractor] = None
    ) -> None:
        self.conditioner = conditioner or BandpassConditioner()
        self.extractor = extractor or BandBiomarkerExtractor()

    def _validate(self, raw_samples: Optional[ArrayLike]) -> NDArray[np.float64]:
        if raw_samples is None:
            raise ValidationError("Input data is empty")

        try:
            data = np.asarray(raw_samples, dtype=np.float64)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Input data is not numeric: {exc}") from exc

        if data.ndim != 1:
            raise ValidationError(f"Expected a single-channel series, got shape {data.shape}")
        if data.size == 0:
            raise ValidationError("Input data is empty")
        if not np.all(np.isfinite(data)):
            raise ValidationError("Input data contains NaN or infinite samples")
        return data

    def _run(self, data: NDArray[np.float64]) -> BrainwaveProcessResult:
        with np.errstate(over="raise", divide="raise", invalid="raise", under="ignore"):
            clamped = clamp_outliers(data)
            conditioned = self.conditioner.condition(clamped)
            spectrum = windowed_spectrum(conditioned)
            relative_power = relative_power_spectrum(spectrum)

            if not np.all(np.isfinite(relative_power)):
                raise NumericError("Relative power spectrum contains non-finite values")

            bands = self.extractor.extract(relative_power)

        return BrainwaveProcessResult(
            success=True,
            theta=bands.theta,
            alpha=bands.alpha,
            beta=bands.beta,
            final_index=bands.final_index,
            conditioned=conditioned,
            spectrum=spectrum,
            relative_power=relative_power,
        )

    def process(self, raw_samples: Optional[ArrayLike]) -> BrainwaveProcessResult:
        """
        Process one capture.

        Args:
            raw_samples: Raw single-channel samples in microvolts

        Returns:
            BrainwaveProcessResult; ``success`` is False on any failure
        """
        start = time.perf_counter()

        try:
            data = self._validate(raw_samples)
            try:
                result = self._run(data)
            except FloatingPointError as exc:
                raise NumericError(f"Arithmetic failure during spectral analysis: {exc}") from exc
        except BrainScreenError as exc:
            logger.warning(
                "capture_processing_failed",
                error_code=exc.code,
                error=exc.message
            )
            return BrainwaveProcessResult.failed(f"Failed to process capture: {exc.message}")

        logger.info(
            "capture_processed",
            n_samples=int(data.size),
            n_bins=int(result.spectrum.size),
            theta=result.theta,
            alpha=result.alpha,
            beta=result.beta,
            final_index=result.final_index,
            elapsed_ms=(time.perf_counter() - start) * 1000
        )
        return result

    def assess(
        self,
        raw_samples: Optional[ArrayLike],
        moca: Optional[float] = None,
        mmse: Optional[float] = None
    ) -> BrainwaveProcessResult:
        """
        Process a capture and attach the risk assessment.

        Invalid scale scores turn the result into a failure.
        """
        result = self.process(raw_samples)
        if not result.success:
            return result

        try:
            result.risk = assess_risk(result.final_index, moca=moca, mmse=mmse)
        except ValidationError as exc:
            logger.warning("risk_assessment_failed", error=exc.message)
            return BrainwaveProcessResult.failed(f"Failed to assess risk: {exc.message}")

        return result
