"""
Freshness validation of the latest sample in a series.
"""

from datetime import datetime, timedelta

from .models import Accepted, Outcome, Rejected, RejectReason, TimeSeries

STALENESS_WINDOW = timedelta(minutes=30)


def evaluate(
    series: TimeSeries,
    enabled: bool,
    now: datetime,
    staleness_window: timedelta = STALENESS_WINDOW,
) -> Outcome:
    """
    Decide whether the current reading of a series can be published.

    The last sample, in source order, is the current reading. It is accepted
    only if its timestamp is strictly after ``now - staleness_window``.

    Args:
        series: Samples for one metric kind
        enabled: Whether the metric kind is turned on
        now: Aware evaluation time
        staleness_window: Maximum accepted sample age

    Returns:
        Accepted with the sample value, or Rejected with the reason
    """
    if not enabled:
        return Rejected(kind=series.kind, reason=RejectReason.DISABLED)

    latest = series.latest
    if latest is None:
        return Rejected(kind=series.kind, reason=RejectReason.EMPTY)

    if not latest.timestamp > now - staleness_window:
        return Rejected(kind=series.kind, reason=RejectReason.STALE, sample=latest)

    return Accepted(kind=series.kind, value=latest.value, sample=latest)
