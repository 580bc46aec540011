"""Unit tests for the aliasing analyzer."""

import math

import numpy as np
import pytest

from signal_quality.analyzers.aliasing_analyzer import (
    calculate_aliased_frequency,
    compare_aliasing,
    frequency_to_bin,
    get_aliased_bins,
    get_harmonic_bins,
    hard_clip_reference,
    identity_reference,
    measure_aliasing,
    sum_bin_power,
    to_db,
    will_alias,
)
from signal_quality.models.results import AliasingMeasurement
from signal_quality.models.verification_config import AliasingTestConfig


class TestAliasingTestConfig:
    """Test suite for AliasingTestConfig."""

    def test_defaults(self):
        """Test default stimulus settings."""
        config = AliasingTestConfig()

        assert config.is_valid(), f"Defaults should be valid, got: {config.validate()}"
        assert config.nyquist() == 22050.0
        assert config.bin_resolution() == pytest.approx(44100.0 / 2048)

    @pytest.mark.parametrize("kwargs", [
        {'test_frequency_hz': 30000.0},
        {'drive_gain': 0.0},
        {'fft_size': 1000},
        {'fft_size': 128},
        {'max_harmonic': 1},
        {'max_harmonic': 65},
    ])
    def test_invalid_settings(self, kwargs):
        """Test rejection of out-of-range settings."""
        assert not AliasingTestConfig(**kwargs).is_valid()


class TestFrequencyFolding:
    """Test suite for bin and folding arithmetic."""

    def test_fifth_harmonic_folds_to_19100(self):
        """Test 25 kHz at 44.1 kHz appears at 19.1 kHz."""
        assert calculate_aliased_frequency(25000.0, 44100.0) == pytest.approx(19100.0)

    def test_in_band_frequency_is_unchanged(self):
        """Test that frequencies below Nyquist do not move."""
        assert calculate_aliased_frequency(10000.0, 44100.0) == pytest.approx(10000.0)

    def test_folding_beyond_sample_rate(self):
        """Test frequencies above the sample rate wrap first."""
        assert calculate_aliased_frequency(45000.0, 44100.0) == pytest.approx(900.0)

    def test_will_alias(self):
        """Test the Nyquist boundary."""
        assert will_alias(25000.0, 44100.0)
        assert not will_alias(22050.0, 44100.0)

    def test_frequency_to_bin(self):
        """Test nearest-bin rounding."""
        assert frequency_to_bin(5000.0, 44100.0, 2048) == 232
        assert frequency_to_bin(0.0, 44100.0, 2048) == 0

    def test_harmonic_bins_of_default_config(self):
        """Test in-band harmonic bins of 5 kHz at 44.1 kHz."""
        assert get_harmonic_bins(AliasingTestConfig()) == [464, 697, 929]

    def test_aliased_bins_of_default_config(self):
        """Test folded harmonic bins of 5 kHz at 44.1 kHz."""
        bins = get_aliased_bins(AliasingTestConfig())

        assert bins == [42, 190, 274, 423, 655, 887], f"Got {bins}"

    def test_aliased_bins_exclude_harmonic_and_fundamental_bins(self):
        """Test that aliased bins never overlap harmonic bins."""
        config = AliasingTestConfig(test_frequency_hz=4410.0)
        excluded = set(get_harmonic_bins(config))
        excluded.add(frequency_to_bin(4410.0, 44100.0, 2048))

        assert not excluded & set(get_aliased_bins(config))

    def test_to_db_floor(self):
        """Test the -200 dB floor."""
        assert to_db(0.0) == -200.0
        assert to_db(1e-11) == -200.0
        assert to_db(1.0) == 0.0
        assert to_db(10.0) == pytest.approx(20.0)

    def test_sum_bin_power_ignores_out_of_range_bins(self):
        """Test root-sum-square over valid bins only."""
        spectrum = np.array([3.0, 4.0, 0.0])

        assert sum_bin_power(spectrum, [0, 1, 5, -1]) == pytest.approx(5.0)


class TestMeasureAliasing:
    """Test suite for measure_aliasing."""

    def test_linear_processor_has_no_aliasing(self):
        """Test that the identity leaves the aliased bins near empty."""
        measurement = measure_aliasing(AliasingTestConfig(), identity_reference)

        assert measurement.is_valid()
        assert measurement.signal_to_aliasing_db > 40.0, \
            f"Identity should be alias-free, got STA {measurement.signal_to_aliasing_db:.1f} dB"

    def test_fundamental_level_of_unit_sine(self):
        """Test the windowed fundamental of a full-scale sine."""
        measurement = measure_aliasing(AliasingTestConfig(), identity_reference)

        # Hann-windowed peak of a unit sine is about N/4, minus scalloping
        assert measurement.fundamental_power_db == pytest.approx(20.0 * math.log10(512.0), abs=2.0)

    def test_hard_clipping_aliases(self):
        """Test that an overdriven hard clipper produces measurable aliasing."""
        config = AliasingTestConfig(drive_gain=4.0)

        measurement = measure_aliasing(config, hard_clip_reference)

        assert measurement.aliasing_power_db > -100.0
        assert measurement.harmonic_power_db > 0.0
        assert measurement.signal_to_aliasing_db < 40.0, \
            f"Hard clipping should alias heavily, got STA {measurement.signal_to_aliasing_db:.1f} dB"

    def test_invalid_config_returns_floor(self):
        """Test the sentinel measurement for invalid configs."""
        called = []

        measurement = measure_aliasing(
            AliasingTestConfig(fft_size=1000),
            lambda x: called.append(x) or x
        )

        assert called == [], "Processor should not run for invalid configs"
        assert measurement == AliasingMeasurement(-200.0, -200.0, -200.0, 0.0)

    def test_custom_transform(self):
        """Test that the supplied transform is used."""

        class RecordingTransform:
            def __init__(self):
                self.sizes = []

            def forward(self, samples):
                self.sizes.append(len(samples))
                return np.fft.rfft(samples)

            def generate_hann(self, size):
                return np.hanning(size + 1)[:-1]

        transform = RecordingTransform()

        measure_aliasing(AliasingTestConfig(fft_size=4096), identity_reference, transform)

        assert transform.sizes == [4096]


class TestCompareAliasing:
    """Test suite for compare_aliasing."""

    def test_linear_path_beats_hard_clipper(self):
        """Test reduction of a linear path against the hard-clip baseline."""
        config = AliasingTestConfig(drive_gain=4.0)

        comparison = compare_aliasing(config, hard_clip_reference, lambda x: x / 4.0)

        assert comparison.reduction_db > 30.0, f"Got reduction {comparison.reduction_db:.1f} dB"
        assert comparison.meets_threshold(30.0)
        assert not comparison.meets_threshold(comparison.reduction_db + 1.0)

    def test_same_processor_has_zero_reduction(self):
        """Test that comparing a processor with itself gives 0 dB."""
        config = AliasingTestConfig(drive_gain=2.0)

        comparison = compare_aliasing(config, hard_clip_reference, hard_clip_reference)

        assert comparison.reduction_db == pytest.approx(0.0)

    def test_to_dict_nests_measurements(self):
        """Test serialization of a comparison."""
        comparison = compare_aliasing(AliasingTestConfig(), identity_reference, identity_reference)

        data = comparison.to_dict()

        assert set(data) == {'reference', 'tested', 'reduction_db'}
        assert 'signal_to_aliasing_db' in data['reference']
