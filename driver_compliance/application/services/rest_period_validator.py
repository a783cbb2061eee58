"""Validation of a driver's rest-period set."""
from datetime import date, datetime, time, timedelta
from typing import List

from driver_compliance.domain.entities.driver import RestPeriod
from driver_compliance.domain.exceptions import InvalidRestPeriod

DAY_START = time(0, 0, 0)
DAY_END = time(23, 59, 59)
MIN_REST_PERIODS = 1
MAX_REST_PERIODS = 10


def _next_second(value: time) -> time:
    return (datetime.combine(date.min, value) + timedelta(seconds=1)).time()


def validate_rest_periods(rest_periods: List[RestPeriod]) -> List[RestPeriod]:
    """
    Check that a rest-period set partitions the whole day.

    Periods are sorted by start time. The first one must start at 00:00:00,
    each following one must start exactly one second after the previous end,
    and the last one must end at 23:59:59.

    Args:
        rest_periods: Periods in any order

    Returns:
        The periods sorted by start time

    Raises:
        InvalidRestPeriod: With a message naming the offending index and the
            expected value
    """
    count = len(rest_periods)
    if count < MIN_REST_PERIODS or count > MAX_REST_PERIODS:
        raise InvalidRestPeriod(
            f"Expected between {MIN_REST_PERIODS} and {MAX_REST_PERIODS} rest periods, got {count}"
        )

    periods = sorted(rest_periods, key=lambda period: period.start)
    last_index = count - 1

    for index, period in enumerate(periods):
        if index == 0:
            if period.start != DAY_START:
                raise InvalidRestPeriod(
                    f"The first rest period (index 0) must start at {DAY_START.isoformat()}, "
                    f"got {period.start.isoformat()}"
                )
        else:
            previous_end = periods[index - 1].end
            expected = _next_second(previous_end)
            if period.start != expected:
                raise InvalidRestPeriod(
                    f"Rest period at index {index} starts at {period.start.isoformat()} "
                    f"but previous period ends at {previous_end.isoformat()}, need one second gap. "
                    f"The correct start time must be {expected.isoformat()}."
                )

        if index == last_index and period.end != DAY_END:
            raise InvalidRestPeriod(
                f"The last rest period (index {index}) must end at {DAY_END.isoformat()}, "
                f"got {period.end.isoformat()}"
            )

        if period.start >= period.end:
            raise InvalidRestPeriod(
                f"Rest period at index {index} has start time {period.start.isoformat()} "
                f"which is not before end time {period.end.isoformat()}."
            )

    return periods
