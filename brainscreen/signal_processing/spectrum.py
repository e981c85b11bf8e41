"""
Windowed spectral transform and relative power normalization.

The transform zero-pads to a power of two, applies a Hanning window and runs
a recursive radix-2 Cooley-Tukey FFT. Spectrum bins are addressed on a fixed
0.1 Hz grid (``settings.frequency_resolution``) independent of the actual
capture length.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray

from brainscreen.core.config import settings
from brainscreen.core.exceptions import ValidationError
from brainscreen.core.logging import get_logger

logger = get_logger(__name__)


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n (1 for n <= 1)."""
    power = 1
    while power < n:
        power *= 2
    return power


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def zero_pad(samples: ArrayLike) -> NDArray[np.float64]:
    """Pad with trailing zeros up to the next power-of-two length."""
    data = np.asarray(samples, dtype=np.float64)
    n = next_power_of_two(data.shape[0])
    padded = np.zeros(n, dtype=np.float64)
    padded[:data.shape[0]] = data
    return padded


def hanning_window(n: int) -> NDArray[np.float64]:
    """
    Raised-cosine window ``0.5 * (1 - cos(2*pi*i / (n - 1)))``.

    A single-point window is 1.0.
    """
    if n == 1:
        return np.ones(1, dtype=np.float64)
    i = np.arange(n, dtype=np.float64)
    return 0.5 * (1.0 - np.cos(2.0 * np.pi * i / (n - 1)))


def fft_radix2(values: ArrayLike) -> NDArray[np.complex128]:
    """
    Recursive radix-2 Cooley-Tukey transform.

    Args:
        values: Sequence whose length is an exact power of two

    Returns:
        Complex spectrum of the same length

    Raises:
        ValidationError: If the length is not a power of two
    """
    data = np.asarray(values, dtype=np.complex128)
    n = data.shape[0]

    if not is_power_of_two(n):
        raise ValidationError(f"FFT length must be a power of two, got {n}")

    return _fft_recursive(data)


def _fft_recursive(data: NDArray[np.complex128]) -> NDArray[np.complex128]:
    n = data.shape[0]
    if n == 1:
        return data.copy()

    even = _fft_recursive(data[0::2])
    odd = _fft_recursive(data[1::2])

    k = np.arange(n // 2)
    twiddled = np.exp(-2j * np.pi * k / n) * odd

    return np.concatenate([even + twiddled, even - twiddled])


def windowed_spectrum(conditioned: ArrayLike) -> NDArray[np.complex128]:
    """
    Pad, window and transform a conditioned capture.

    Args:
        conditioned: Filtered samples

    Returns:
        Complex spectrum of length next_power_of_two(len(conditioned))
    """
    padded = zero_pad(conditioned)
    windowed = padded * hanning_window(padded.shape[0])
    return fft_radix2(windowed)


def frequency_to_bin(frequency: float, n_bins: int) -> int:
    """
    Map a frequency to a spectrum index on the fixed resolution grid.

    The index is clamped into [0, n_bins - 1].
    """
    index = int(round(frequency / settings.frequency_resolution))
    return max(0, min(index, n_bins - 1))


def band_slice(spectrum_length: int, low_freq: float, high_freq: float) -> slice:
    """Inclusive index range covering [low_freq, high_freq]."""
    if spectrum_length == 0:
        return slice(0, 0)
    low = frequency_to_bin(low_freq, spectrum_length)
    high = frequency_to_bin(high_freq, spectrum_length)
    return slice(low, high + 1)


def power_spectrum(spectrum: ArrayLike) -> NDArray[np.float64]:
    """Squared magnitude of each complex bin."""
    values = np.asarray(spectrum, dtype=np.complex128)
    return values.real ** 2 + values.imag ** 2


def relative_power_spectrum(
    spectrum: ArrayLike,
    reference_low: float | None = None,
    reference_high: float | None = None
) -> NDArray[np.float64]:
    """
    Express each bin's power as a percentage of the reference band total.

    Args:
        spectrum: Complex spectrum
        reference_low: Reference band start in Hz (default 3 Hz)
        reference_high: Reference band end in Hz (default 30 Hz)

    Returns:
        Relative power per bin in percent; all zeros when the reference
        band holds no power
    """
    low = settings.reference_band_low if reference_low is None else reference_low
    high = settings.reference_band_high if reference_high is None else reference_high

    power = power_spectrum(spectrum)
    reference_total = float(np.sum(power[band_slice(power.shape[0], low, high)]))

    if reference_total <= 0.0:
        logger.debug(
            "reference_band_empty",
            n_bins=power.shape[0],
            reference_band=f"{low}-{high} Hz"
        )
        return np.zeros_like(power)

    return power / reference_total * 100.0
