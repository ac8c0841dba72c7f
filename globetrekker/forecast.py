# ABOUTME: Reduces a 3-hourly forecast series to one representative sample per weekday.
# ABOUTME: Picks the sample nearest local noon for each day and keeps at most five days.

from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

from globetrekker.models import ForecastDay, WeatherSample

MAX_FORECAST_DAYS = 5
NOON = 12


def local_time(sample: WeatherSample, utc_offset: int = 0) -> datetime:
    """Sample time shifted to the location's clock (utc_offset in seconds)."""
    return datetime.fromtimestamp(sample.timestamp, tz=timezone(timedelta(seconds=utc_offset)))


def day_label(when: datetime) -> str:
    """Short weekday name ("Mon", "Tue", ...) of a local time."""
    return when.strftime("%a")


def bucket_by_day(samples: Iterable[WeatherSample], utc_offset: int = 0) -> list[ForecastDay]:
    """Keep the sample closest to noon for each weekday label, oldest first, at most five.

    A later sample only replaces the current pick for its day when it is strictly
    closer to 12:00, so on a tie the first one seen stays. Short windows yield fewer
    days; the result is never padded.
    """
    picks: dict[str, tuple[WeatherSample, int]] = {}
    for sample in samples:
        when = local_time(sample, utc_offset)
        label = day_label(when)
        current = picks.get(label)
        if current is None or abs(when.hour - NOON) < abs(current[1] - NOON):
            picks[label] = (sample, when.hour)

    ordered = sorted(picks.items(), key=lambda item: item[1][0].timestamp)
    return [ForecastDay(label=label, sample=sample) for label, (sample, _) in ordered[:MAX_FORECAST_DAYS]]
