"""
Character state machine: (time, amplitude, previous amplitude) -> AnimationState.

Evaluated independently per frame. The only memory is the previous frame's
amplitude, used to smooth mouth movement in the mid loudness band.
"""

import math
from typing import List

from potato_news.domain.models import DEFAULT_ACCESSORIES, AnimationState, EyeState, MouthState

# Mouth
MOUTH_CLOSED_THRESHOLD = 0.2
MOUTH_OPEN_THRESHOLD = 0.6
SMOOTHING_CURRENT_WEIGHT = 0.7
SMOOTHING_PREVIOUS_WEIGHT = 0.3

# Emphasis: a slow sine that occasionally forces the mouth open and tilts the head
EMPHASIS_FREQUENCY = 0.7  # rad/s; sin(0) == 0 so emphasis is off at t=0
EMPHASIS_GATE = 0.95
EMPHASIS_MIN_AMPLITUDE = 0.4
EMPHASIS_TILT_DEGREES = 3.0

# Eyes
BLINK_CYCLE_SECONDS = 5.0
BLINK_PHASE = 4.9  # ~0.1s squint at the end of each cycle
EXPRESSION_CYCLE_SECONDS = 15.0
EXPRESSION_PHASE = 14.7  # ~0.3s expression at the end of each cycle
EXPRESSIONS = (EyeState.WIDE, EyeState.ROLLING, EyeState.WINK)
SPIKE_AMPLITUDE = 0.7
SPIKE_FREQUENCY = 3.0
SPIKE_GATE = 0.9

# Head
SWAY_FREQUENCY = 0.5
SWAY_DEGREES = 5.0
JITTER_FREQUENCY = 7.3
JITTER_DEGREES = 1.5


def _emphasis_active(time_position: float) -> bool:
    return math.sin(time_position * EMPHASIS_FREQUENCY) > EMPHASIS_GATE


def determine_mouth_state(time_position: float, amplitude: float, previous_amplitude: float) -> MouthState:
    if amplitude > EMPHASIS_MIN_AMPLITUDE and _emphasis_active(time_position):
        return MouthState.OPEN

    # Clear onsets and offsets follow the current frame so silence closes the mouth at once
    if amplitude < MOUTH_CLOSED_THRESHOLD:
        return MouthState.CLOSED
    if amplitude >= MOUTH_OPEN_THRESHOLD:
        return MouthState.OPEN

    smoothed = SMOOTHING_CURRENT_WEIGHT * amplitude + SMOOTHING_PREVIOUS_WEIGHT * previous_amplitude
    if smoothed < MOUTH_CLOSED_THRESHOLD:
        return MouthState.CLOSED
    if smoothed < MOUTH_OPEN_THRESHOLD:
        return MouthState.HALF_OPEN
    return MouthState.OPEN


def determine_eye_state(time_position: float, amplitude: float) -> EyeState:
    if time_position % BLINK_CYCLE_SECONDS > BLINK_PHASE:
        return EyeState.SQUINT

    if time_position % EXPRESSION_CYCLE_SECONDS > EXPRESSION_PHASE:
        index = int(time_position // EXPRESSION_CYCLE_SECONDS) % len(EXPRESSIONS)
        return EXPRESSIONS[index]

    if amplitude > SPIKE_AMPLITUDE and math.sin(time_position * SPIKE_FREQUENCY) > SPIKE_GATE:
        return EyeState.WIDE

    return EyeState.NEUTRAL


def determine_head_rotation(time_position: float, amplitude: float) -> float:
    sway = math.sin(time_position * SWAY_FREQUENCY) * SWAY_DEGREES
    jitter = math.sin(time_position * JITTER_FREQUENCY) * JITTER_DEGREES * amplitude
    tilt = EMPHASIS_TILT_DEGREES if _emphasis_active(time_position) else 0.0
    return sway + jitter + tilt


def compute_state(time_position: float, amplitude: float, previous_amplitude: float) -> AnimationState:
    """Pose for the frame at `time_position` seconds."""
    return AnimationState(
        eye_state=determine_eye_state(time_position, amplitude),
        mouth_state=determine_mouth_state(time_position, amplitude, previous_amplitude),
        head_rotation=determine_head_rotation(time_position, amplitude),
        accessory_indices=DEFAULT_ACCESSORIES,
    )


def state_track(amplitudes: List[float], frame_rate: int) -> List[AnimationState]:
    """Evaluate the machine for every frame of an amplitude track."""
    states = []
    previous = 0.0
    for i, amplitude in enumerate(amplitudes):
        states.append(compute_state(i / frame_rate, amplitude, previous))
        previous = amplitude
    return states
