"""
Rain engine.

Takes the 3-hour forecast samples for a location and answers
"will it rain tomorrow?".

Model:
  window      = [local midnight tomorrow, local midnight the day after)
  considered  = samples inside the window
                (first 8 samples, ~24h, when none fall inside it)
  matched     = considered samples with rain volume > 0
  chance      = round(100 × matched / considered)     0 when nothing considered

"Local" means the time frame of the reference instant: the host clock when
it is naive, its own tzinfo when it is aware.
"""

from dataclasses import dataclass
from datetime import datetime, time, timedelta, tzinfo

from data.weather import ForecastSample


# 8 × 3h slots ≈ the next 24 hours
FALLBACK_SAMPLE_COUNT = 8


@dataclass(frozen=True)
class DayWindow:
    start: datetime   # inclusive
    end: datetime     # exclusive

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end


@dataclass(frozen=True)
class RainSummary:
    will_rain: bool
    chance_of_rain: int                       # 0-100
    max_rain_mm: float
    total_rain_mm: float
    matched_samples: tuple[ForecastSample, ...]
    considered_count: int
    window: DayWindow
    used_fallback: bool                       # True when the window was empty


# ---------------------------------------------------------------------------
# Time helpers
# ---------------------------------------------------------------------------

def tomorrow_window(reference_now: datetime) -> DayWindow:
    """Calendar day after *reference_now*, midnight to midnight."""
    tz = reference_now.tzinfo
    tomorrow = reference_now.date() + timedelta(days=1)
    return DayWindow(
        start=datetime.combine(tomorrow, time.min, tzinfo=tz),
        end=datetime.combine(tomorrow + timedelta(days=1), time.min, tzinfo=tz),
    )


def sample_time(sample: ForecastSample, tz: tzinfo | None = None) -> datetime:
    """Start of the sample's slot; naive host-local time when *tz* is None."""
    return datetime.fromtimestamp(sample.timestamp, tz=tz)


def select_samples(
    samples: list[ForecastSample], window: DayWindow
) -> tuple[list[ForecastSample], bool]:
    """
    Pick the samples that count for *window*.

    Returns (considered, used_fallback).
    """
    tz = window.start.tzinfo
    in_window = [s for s in samples if window.contains(sample_time(s, tz))]
    if in_window:
        return in_window, False
    return list(samples[:FALLBACK_SAMPLE_COUNT]), True


def _percent(part: int, whole: int) -> int:
    """round(100 × part / whole) with halves rounded up; 0 when whole is 0."""
    if whole == 0:
        return 0
    return (200 * part + whole) // (2 * whole)


# ---------------------------------------------------------------------------
# Public API — derive_rain_summary()
# ---------------------------------------------------------------------------

def derive_rain_summary(samples: list[ForecastSample], reference_now: datetime) -> RainSummary:
    """Core rain computation. Never raises on well-formed samples."""
    window = tomorrow_window(reference_now)
    considered, used_fallback = select_samples(samples, window)

    will_rain = False
    max_rain = 0.0
    total_rain = 0.0
    matched = []

    for sample in considered:
        if sample.rain_mm is None or sample.rain_mm <= 0:
            continue
        will_rain = True
        total_rain += sample.rain_mm
        max_rain = max(max_rain, sample.rain_mm)
        matched.append(sample)

    return RainSummary(
        will_rain=will_rain,
        chance_of_rain=_percent(len(matched), len(considered)),
        max_rain_mm=max_rain,
        total_rain_mm=total_rain,
        matched_samples=tuple(matched),
        considered_count=len(considered),
        window=window,
        used_fallback=used_fallback,
    )
