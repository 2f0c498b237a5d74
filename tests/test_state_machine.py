import math

import pytest

from potato_news.animation.state_machine import (
    compute_state,
    determine_eye_state,
    determine_head_rotation,
    determine_mouth_state,
    state_track,
)
from potato_news.domain.models import DEFAULT_ACCESSORIES, EyeState, MouthState

# sin(0.7 t) peaks here, so the emphasis gesture is active
EMPHASIS_TIME = (math.pi / 2) / 0.7


def test_mouth_follows_loudness_onsets_and_offsets():
    states = state_track([0.1, 0.1, 0.7, 0.7, 0.05], frame_rate=30)
    assert [s.mouth_state for s in states] == [
        MouthState.CLOSED,
        MouthState.CLOSED,
        MouthState.OPEN,
        MouthState.OPEN,
        MouthState.CLOSED,
    ]


def test_mid_band_uses_smoothed_amplitude():
    assert determine_mouth_state(0.0, 0.4, 0.4) == MouthState.HALF_OPEN
    # 0.7 * 0.21 + 0.3 * 0.0 is below the closed threshold
    assert determine_mouth_state(0.0, 0.21, 0.0) == MouthState.CLOSED


def test_emphasis_forces_open_mouth_and_tilts_head():
    assert determine_mouth_state(EMPHASIS_TIME, 0.5, 0.5) == MouthState.OPEN
    assert determine_mouth_state(EMPHASIS_TIME, 0.3, 0.3) == MouthState.HALF_OPEN

    tilted = determine_head_rotation(EMPHASIS_TIME, 0.0)
    assert tilted == pytest.approx(5 * math.sin(0.5 * EMPHASIS_TIME) + 3.0)


@pytest.mark.parametrize("t", [4.95, 9.95, 24.95])
def test_blink_at_end_of_each_five_second_cycle(t):
    assert determine_eye_state(t, 0.5) == EyeState.SQUINT


@pytest.mark.parametrize("t, expected", [
    (14.8, EyeState.WIDE),
    (29.8, EyeState.ROLLING),
    (44.8, EyeState.WINK),
    (59.8, EyeState.WIDE),
])
def test_expressions_cycle_every_fifteen_seconds(t, expected):
    assert determine_eye_state(t, 0.1) == expected


def test_loud_spike_widens_eyes():
    t = math.pi / 6  # sin(3t) == 1
    assert determine_eye_state(t, 0.8) == EyeState.WIDE
    assert determine_eye_state(t, 0.5) == EyeState.NEUTRAL


def test_neutral_eyes_by_default():
    assert determine_eye_state(1.0, 0.3) == EyeState.NEUTRAL


def test_head_rotation_stays_within_sway_jitter_and_tilt():
    amplitudes = [1.0] * 3000
    for state in state_track(amplitudes, frame_rate=30):
        assert abs(state.head_rotation) <= 5.0 + 1.5 + 3.0


def test_compute_state_carries_default_accessories():
    state = compute_state(0.0, 0.0, 0.0)
    assert state.accessory_indices == DEFAULT_ACCESSORIES
    assert state.head_rotation == 0.0
    assert state.eye_state == EyeState.NEUTRAL


def test_state_track_is_deterministic():
    amplitudes = [0.1, 0.5, 0.9, 0.3] * 50
    assert state_track(amplitudes, 30) == state_track(amplitudes, 30)
