"""
Unit tests for signal processing components.

Tests:
- Outlier clamp
- Bandpass conditioner
- Windowed spectral transform
- Relative power normalizer
- Band biomarker extraction
"""

import pytest
import numpy as np
from numpy.testing import assert_array_equal, assert_allclose

from brainscreen.core.exceptions import ValidationError
from brainscreen.signal_processing.preprocessing import (
    BIQUAD_A,
    BIQUAD_B,
    BandpassConditioner,
    clamp_outliers,
)
from brainscreen.signal_processing.spectrum import (
    band_slice,
    fft_radix2,
    hanning_window,
    next_power_of_two,
    relative_power_spectrum,
    windowed_spectrum,
    zero_pad,
)
from brainscreen.signal_processing.feature_extraction import (
    BandBiomarkerExtractor,
    alpha_index,
    beta_index,
    theta_index,
)


class TestOutlierClamp:
    """Test amplitude clamping."""

    def test_values_bounded(self):
        rng = np.random.RandomState(0)
        raw = rng.normal(0, 300, 1000)
        clamped = clamp_outliers(raw)

        assert clamped.shape == raw.shape
        assert np.max(np.abs(clamped)) <= 100.0

    def test_out_of_range_set_to_bound(self):
        clamped = clamp_outliers([150.0, -250.0, 42.0, 100.0, -100.0])
        assert_array_equal(clamped, [100.0, -100.0, 42.0, 100.0, -100.0])

    def test_empty_input(self):
        assert clamp_outliers([]).size == 0

    def test_input_not_modified(self):
        raw = np.array([500.0, -500.0])
        clamp_outliers(raw)
        assert_array_equal(raw, [500.0, -500.0])


class TestBandpassConditioner:
    """Test fixed-coefficient biquad filtering."""

    @pytest.fixture
    def conditioner(self):
        return BandpassConditioner()

    @staticmethod
    def _reference_biquad(data):
        """Direct-form recurrence with zeroed state."""
        b0, b1, b2 = BIQUAD_B
        _, a1, a2 = BIQUAD_A
        x1 = x2 = y1 = y2 = 0.0
        out = []
        for x in data:
            y = b0 * x + b1 * x1 + b2 * x2 - a1 * y1 - a2 * y2
            x2, x1 = x1, x
            y2, y1 = y1, y
            out.append(y)
        return np.array(out)

    def test_same_length(self, conditioner):
        data = np.sin(np.linspace(0, 20, 500))
        assert conditioner.condition(data).shape == data.shape

    def test_matches_recurrence(self, conditioner):
        rng = np.random.RandomState(1)
        data = rng.uniform(-100, 100, 300)
        assert_allclose(conditioner.condition(data), self._reference_biquad(data), rtol=1e-9, atol=1e-12)

    def test_short_input_identity(self, conditioner):
        assert_array_equal(conditioner.condition([5.0, -3.0]), [5.0, -3.0])
        assert conditioner.condition([]).size == 0

    def test_state_reset_between_calls(self, conditioner):
        data = np.ones(50)
        first = conditioner.condition(data)
        second = conditioner.condition(data)
        assert_array_equal(first, second)

    def test_chunked_state_matches_single_pass(self, conditioner):
        rng = np.random.RandomState(2)
        data = rng.uniform(-50, 50, 1000)

        whole = conditioner.condition(data)

        state = None
        pieces = []
        for chunk in np.array_split(data, 7):
            filtered, state = conditioner.condition_chunk(chunk, state)
            pieces.append(filtered)

        assert_allclose(np.concatenate(pieces), whole, rtol=1e-9, atol=1e-12)

    def test_rejects_bad_coefficients(self):
        with pytest.raises(ValueError):
            BandpassConditioner(a=(2.0, -1.0, 0.5))


class TestSpectralTransform:
    """Test padding, windowing and the radix-2 FFT."""

    @pytest.mark.parametrize("n, expected", [
        (0, 1), (1, 1), (2, 2), (3, 4), (1000, 1024), (1024, 1024), (1025, 2048),
    ])
    def test_next_power_of_two(self, n, expected):
        assert next_power_of_two(n) == expected

    @pytest.mark.parametrize("n", [1, 2, 5, 100, 511, 2048, 3000])
    def test_output_length_power_of_two(self, n):
        spectrum = windowed_spectrum(np.ones(n))
        length = spectrum.shape[0]

        assert length >= n
        assert length & (length - 1) == 0

    def test_zero_pad_keeps_samples(self):
        padded = zero_pad([1.0, 2.0, 3.0])
        assert_array_equal(padded, [1.0, 2.0, 3.0, 0.0])

    def test_hanning_window(self):
        window = hanning_window(8)
        expected = 0.5 * (1 - np.cos(2 * np.pi * np.arange(8) / 7))
        assert_allclose(window, expected)
        assert window[0] == 0.0
        assert_array_equal(hanning_window(1), [1.0])

    def test_fft_matches_numpy(self):
        rng = np.random.RandomState(3)
        data = rng.normal(size=256) + 1j * rng.normal(size=256)
        assert_allclose(fft_radix2(data), np.fft.fft(data), rtol=1e-9, atol=1e-9)

    def test_fft_single_value(self):
        assert_array_equal(fft_radix2([4.0]), [4.0 + 0j])

    def test_fft_rejects_non_power_of_two(self):
        with pytest.raises(ValidationError):
            fft_radix2(np.ones(6))

    def test_input_not_mutated(self):
        data = np.ones(100)
        windowed_spectrum(data)
        assert_array_equal(data, np.ones(100))


class TestRelativePower:
    """Test relative power normalization."""

    def test_reference_band_sums_to_100(self):
        rng = np.random.RandomState(4)
        spectrum = fft_radix2(rng.normal(size=1024))
        relative = relative_power_spectrum(spectrum)

        window = band_slice(relative.shape[0], 3.0, 30.0)
        assert window == slice(30, 301)
        assert_allclose(np.sum(relative[window]), 100.0, atol=1e-6)
        assert relative.shape == spectrum.shape
        assert np.all(relative >= 0)

    def test_zero_power_gives_zeros(self):
        relative = relative_power_spectrum(np.zeros(512, dtype=complex))
        assert_array_equal(relative, np.zeros(512))

    def test_band_indices_clamped(self):
        # 64 bins: every band collapses onto the last bin
        assert band_slice(64, 8.0, 13.0) == slice(63, 64)
        assert band_slice(0, 8.0, 13.0) == slice(0, 0)


class TestBandBiomarkerExtractor:
    """Test band index formulas and extraction."""

    @pytest.fixture
    def extractor(self):
        return BandBiomarkerExtractor()

    def test_formulas(self):
        assert theta_index(2.5) == 50.0
        assert theta_index(0.4) == 0.0
        assert alpha_index(0.2) == pytest.approx(50.0)
        assert alpha_index(0.9) == 0.0
        assert beta_index(0.1) == pytest.approx(40.0)
        assert beta_index(-1.0) == 100.0

    def test_extract_known_peaks(self, extractor):
        relative = np.zeros(1024)
        relative[55] = 1.0    # theta, 5.5 Hz
        relative[100] = 20.0  # alpha, 10 Hz
        relative[200] = 10.0  # beta, 20 Hz

        result = extractor.extract(relative)

        assert result.theta == 0.0
        assert result.alpha == pytest.approx(50.0)
        assert result.beta == pytest.approx(40.0)
        assert result.final_index == pytest.approx(30.0)

    def test_all_zero_spectrum(self, extractor):
        result = extractor.extract(np.zeros(2048))

        assert result.theta == 0.0
        assert result.alpha == pytest.approx(70.0)
        assert result.beta == pytest.approx(50.0)

    def test_empty_spectrum_fails(self, extractor):
        with pytest.raises(ValidationError):
            extractor.extract(np.zeros(0))

    def test_indices_bounded(self, extractor):
        rng = np.random.RandomState(5)
        for _ in range(20):
            relative = rng.uniform(0, 400, 4096)
            result = extractor.extract(relative)
            for value in (result.theta, result.alpha, result.beta, result.final_index):
                assert 0.0 <= value <= 100.0


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
