"""Tests for tempo smoothing and missed-beat inference."""

import pytest

from livescore.analysis import TempoEstimator, round_half_up


class TestRounding:
    def test_halves_round_up(self):
        """Halves round toward positive infinity."""
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(-0.5) == 0
        assert round_half_up(1.49) == 1


class TestTempoEstimator:
    """Tests for interval smoothing."""

    def test_defaults_to_120_bpm(self):
        """A new estimator assumes 500 ms beats."""
        tempo = TempoEstimator()
        assert tempo.smoothed_interval == 500.0
        assert tempo.bpm == pytest.approx(120.0)

    def test_first_update_only_records(self):
        """The first beat has no interval to fold in."""
        tempo = TempoEstimator()
        assert tempo.update(1000.0) is False
        assert tempo.last_beat_time == 1000.0
        assert tempo.smoothed_interval == 500.0

    def test_interval_folded_with_fixed_weight(self):
        """Accepted intervals move the average by 30 percent."""
        tempo = TempoEstimator()
        tempo.commit(0.0)

        assert tempo.update(600.0) is True
        assert tempo.smoothed_interval == pytest.approx(500 * 0.7 + 600 * 0.3)

    def test_large_jump_not_folded(self):
        """Intervals over 1.5x the average are gaps, not tempo."""
        tempo = TempoEstimator()
        tempo.commit(0.0)

        assert tempo.update(800.0) is False
        assert tempo.smoothed_interval == 500.0

    def test_jitter_below_debounce_floor_ignored(self):
        """Intervals under 150 ms are jitter."""
        tempo = TempoEstimator()
        tempo.commit(0.0)

        assert tempo.update(100.0) is False
        assert tempo.smoothed_interval == 500.0

    def test_update_does_not_move_last_beat(self):
        """Only commit records the processed beat."""
        tempo = TempoEstimator()
        tempo.commit(0.0)
        tempo.update(500.0)
        assert tempo.last_beat_time == 0.0

    def test_converges_toward_steady_tempo(self):
        """A steady tempo is reached after enough beats."""
        tempo = TempoEstimator()
        t = 0.0
        tempo.update(t)
        for _ in range(40):
            t += 400.0
            tempo.update(t)
            tempo.commit(t)

        assert tempo.smoothed_interval == pytest.approx(400.0, abs=1.0)
        assert tempo.bpm == pytest.approx(150.0, abs=0.5)

    def test_reset(self):
        """Reset restores the default interval."""
        tempo = TempoEstimator()
        tempo.commit(0.0)
        tempo.update(600.0)

        tempo.reset()

        assert tempo.smoothed_interval == 500.0
        assert tempo.last_beat_time is None


class TestVirtualBeats:
    """Tests for missed-beat inference."""

    def test_no_prior_beat(self):
        """No beats can be missed before the first one."""
        assert TempoEstimator().estimate_virtual_beats(5000.0) == 0

    def test_regular_interval_has_no_missed_beats(self):
        """Intervals under the jump limit miss nothing."""
        tempo = TempoEstimator()
        tempo.commit(0.0)
        assert tempo.estimate_virtual_beats(500.0) == 0
        assert tempo.estimate_virtual_beats(700.0) == 0

    def test_three_missed_beats(self):
        """Four intervals' worth of time means three missed beats."""
        tempo = TempoEstimator()
        tempo.commit(0.0)
        assert tempo.estimate_virtual_beats(2000.0) == 3

    def test_one_missed_beat(self):
        """Two intervals' worth of time means one missed beat."""
        tempo = TempoEstimator()
        tempo.commit(0.0)
        assert tempo.estimate_virtual_beats(1000.0) == 1

    def test_half_beat_rounds_up(self):
        """2.5 intervals round up to three beats."""
        tempo = TempoEstimator()
        tempo.commit(0.0)
        # 2.5 intervals -> 3 beats -> 2 missed
        assert tempo.estimate_virtual_beats(1250.0) == 2
