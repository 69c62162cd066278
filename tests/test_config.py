"""Tests for configuration."""

import numpy as np
import pytest

from livescore.core import ScorifyConfig, compute_tatum


class TestScorifyConfig:
    """Tests for quantizer settings."""

    def test_defaults(self):
        """Defaults match the live engine's constants."""
        config = ScorifyConfig()
        assert config.grouping_window_ms == 250.0
        assert config.max_tempo_jump == 1.5
        assert config.on_beat_tolerance_ms == 70.0
        assert config.default_interval_ms == 500
        assert config.tatum_units_per_beat == 2
        assert config.duration_unit == 8

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"grouping_window_ms": 0},
            {"max_tempo_jump": 1.0},
            {"on_beat_tolerance_ms": -1},
            {"tempo_smoothing": 0.0},
            {"tempo_smoothing": 1.5},
            {"default_interval_ms": 0},
            {"min_beat_duration_ms": 0},
            {"tatum_units_per_beat": 0},
            {"tatum_units_per_beat": 2.7},
            {"tatum_units_per_beat": 2.0},
            {"tatum_units_per_beat": True},
            {"duration_unit": 3},
        ],
    )
    def test_invalid_values_rejected(self, kwargs):
        """Out-of-range settings fail at construction."""
        with pytest.raises(ValueError):
            ScorifyConfig(**kwargs)

    def test_numpy_tatum_accepted(self):
        """numpy integers are valid tatum resolutions."""
        assert ScorifyConfig(tatum_units_per_beat=np.int64(4)).tatum_units_per_beat == 4

    def test_from_dict(self):
        """Known keys override defaults."""
        config = ScorifyConfig.from_dict({"tatum_units_per_beat": 4, "on_beat_tolerance_ms": 50})
        assert config.tatum_units_per_beat == 4
        assert config.on_beat_tolerance_ms == 50

    def test_from_dict_rejects_unknown_keys(self):
        """Misspelled keys are reported, not ignored."""
        with pytest.raises(ValueError, match="tatum"):
            ScorifyConfig.from_dict({"tatum": 4})

    def test_to_dict_feeds_from_dict(self):
        """A dumped config loads back unchanged."""
        config = ScorifyConfig(tatum_units_per_beat=4)
        assert ScorifyConfig.from_dict(config.to_dict()) == config


class TestComputeTatum:
    """Tests for deriving the tatum from the minimum beat level."""

    def test_common_levels(self):
        """Quarter, eighth and sixteenth grids."""
        assert compute_tatum(4) == 1
        assert compute_tatum(8) == 2
        assert compute_tatum(16) == 4

    def test_never_below_one(self):
        """Coarser levels still get one unit per beat."""
        assert compute_tatum(2) == 1

    def test_unknown_level(self):
        """Levels that are not note types are refused."""
        with pytest.raises(ValueError):
            compute_tatum(12)
