"""
Amplitude analysis for lip sync.

The primary path measures the speech waveform: pydub decodes the file, numpy
computes the RMS of each frame-aligned window, and the dBFS value is mapped onto
[0, 1] (-40 dB and below counts as silence). When decoding or analysis fails the
analyzer substitutes a synthetic talk/pause curve so rendering can go on.
"""

import math
import os
import random
from typing import List, Optional, Tuple

import numpy as np
from pydub import AudioSegment

from potato_news.config import FRAME_RATE
from potato_news.errors import AudioAnalysisError, EncoderError
from potato_news.ports.interfaces import IAudioAnalyzer
from potato_news.video.ffmpeg import probe_duration

DEFAULT_DURATION = 30.0  # seconds, when nothing at all can be learned about the file
ESTIMATED_BYTES_PER_SECOND = 128 * 1024 / 8  # 128 kbit/s mp3
SILENCE_DB = -40.0

# Synthetic curve: 2s of speech followed by 0.5s of pause
SYNTHETIC_SPEECH_SECONDS = 2.0
SYNTHETIC_CYCLE_SECONDS = 2.5


def frame_count(duration: float, frame_rate: int) -> int:
    """Number of output frames needed to cover `duration` seconds."""
    return int(math.ceil(duration * frame_rate))


def interpolate_amplitudes(amplitudes: List[float], target_count: int) -> List[float]:
    """Stretch a short curve to `target_count` values by linear interpolation."""
    if not amplitudes:
        return [0.0] * target_count
    factor = len(amplitudes) / target_count
    last = len(amplitudes) - 1
    result = []
    for i in range(target_count):
        pos = i * factor
        index = min(int(pos), last)
        next_index = min(index + 1, last)
        fraction = pos - int(pos)
        result.append(amplitudes[index] * (1 - fraction) + amplitudes[next_index] * fraction)
    return result


def downsample_amplitudes(amplitudes: List[float], target_count: int) -> List[float]:
    """Shrink a long curve to `target_count` values by stride sampling."""
    factor = len(amplitudes) / target_count
    return [amplitudes[int(i * factor)] for i in range(target_count)]


def fit_to_frame_count(amplitudes: List[float], target_count: int) -> List[float]:
    if len(amplitudes) < target_count:
        return interpolate_amplitudes(amplitudes, target_count)
    if len(amplitudes) > target_count:
        return downsample_amplitudes(amplitudes, target_count)
    return list(amplitudes)


class AmplitudeAnalyzer(IAudioAnalyzer):
    """Derives a per-frame loudness curve and the duration of a speech file."""

    def __init__(self, frame_rate: int = FRAME_RATE, seed: Optional[int] = None):
        self.frame_rate = frame_rate
        self._rng = random.Random(seed)

    def analyze(self, audio_path: str) -> Tuple[List[float], float]:
        """Return (amplitudes, duration) with len(amplitudes) == ceil(duration * frame_rate)."""
        print(f"  🔊 Analyzing audio for lip sync: {audio_path}")
        duration = self.get_duration(audio_path)
        total_frames = frame_count(duration, self.frame_rate)

        try:
            measured = self.measure_amplitudes(audio_path)
        except AudioAnalysisError as e:
            print(f"  ⚠️  Audio analysis failed for {audio_path}: {e}, using synthetic lip sync")
            return self.generate_synthetic_amplitudes(duration), duration

        if len(measured) != total_frames:
            print(f"  ℹ️  Resampling amplitude data from {len(measured)} to {total_frames} frames")
        return fit_to_frame_count(measured, total_frames), duration

    def get_duration(self, audio_path: str) -> float:
        """Probe the real duration; estimate from file size, then fall back to a default."""
        try:
            return probe_duration(audio_path)
        except EncoderError as e:
            print(f"  ⚠️  Could not probe duration of {audio_path} ({e}), estimating from file size")

        try:
            size = os.path.getsize(audio_path)
        except OSError as e:
            print(f"  ⚠️  Could not read {audio_path}: {e}, assuming {DEFAULT_DURATION:.0f}s")
            return DEFAULT_DURATION
        if size <= 0:
            print(f"  ⚠️  {audio_path} is empty, assuming {DEFAULT_DURATION:.0f}s")
            return DEFAULT_DURATION
        return float(math.ceil(size / ESTIMATED_BYTES_PER_SECOND))

    def measure_amplitudes(self, audio_path: str) -> List[float]:
        """RMS loudness per frame window, normalized to [0, 1]."""
        try:
            audio = AudioSegment.from_file(audio_path)
        except Exception as e:
            raise AudioAnalysisError(f"could not decode audio: {e}") from e

        audio = audio.set_channels(1)
        samples = np.array(audio.get_array_of_samples(), dtype=np.float64)
        if samples.size == 0:
            raise AudioAnalysisError("audio contains no samples")

        samples_per_frame = max(1, int(round(audio.frame_rate / self.frame_rate)))
        total = int(math.ceil(samples.size / samples_per_frame))
        padded = np.zeros(total * samples_per_frame)
        padded[:samples.size] = samples
        windows = padded.reshape(total, samples_per_frame)

        rms = np.sqrt(np.mean(windows ** 2, axis=1))
        full_scale = float(1 << (8 * audio.sample_width - 1))
        with np.errstate(divide="ignore"):
            db = 20 * np.log10(rms / full_scale)
        normalized = np.clip((db - SILENCE_DB) / -SILENCE_DB, 0.0, 1.0)
        return [float(v) for v in np.nan_to_num(normalized, nan=0.0, neginf=0.0)]

    def generate_synthetic_amplitudes(self, duration: float) -> List[float]:
        """Plausible talk/pause pattern used when the waveform can't be measured."""
        total_frames = frame_count(duration, self.frame_rate)
        cycle_frames = max(1, int(self.frame_rate * SYNTHETIC_CYCLE_SECONDS))
        amplitudes = []
        for i in range(total_frames):
            cycle_position = (i % cycle_frames) / self.frame_rate
            if cycle_position < SYNTHETIC_SPEECH_SECONDS:
                speech_phase = (i % 10) / 10
                base_level = 0.5 + 0.3 * math.sin(speech_phase * math.pi * 2)
                jitter = self._rng.random() * 0.2 - 0.1
                amplitudes.append(max(0.0, min(1.0, base_level + jitter)))
            else:
                amplitudes.append(self._rng.random() * 0.2)
        return amplitudes
