# src/croncalc/occurrence.py
from calendar import monthrange
from datetime import MAXYEAR, datetime, timedelta
from typing import Callable, Iterator, Optional

from .expression import FieldKind, Schedule, parse_expression
from .shared import cron_weekday

Clock = Callable[[], datetime]

# seconds, minutes, hours: resolved low to high before the date fields
TIME_KINDS = (FieldKind.SECOND, FieldKind.MINUTE, FieldKind.HOUR)


def local_now() -> datetime:
    """The default clock: current local wall time, naive."""
    return datetime.now()


def _first_times(schedule: Schedule) -> list[int]:
    return [schedule[kind].first() for kind in TIME_KINDS]


def _resolve_date_time(
    schedule: Schedule,
    floor: tuple[int, int, int, int, int, int],
    end: datetime,
) -> Optional[tuple[int, int, int, int, int, int]]:
    """
    Carry-propagating resolution of every field except day-of-week.

    ``floor`` is (year, month, day, hour, minute, second) of the earliest
    admissible instant; second may be 60. Returns the earliest fields at or
    after the floor that satisfy second through month and form a real date,
    or None when no such date exists before ``end``.

    A field that resolves past its floor value resets every lower field to
    its first allowed value. A field with no allowed value left does the
    same and carries one into the field above.
    """
    base_year, base_month, base_day, base_hour, base_minute, base_second = floor
    bases = [base_second, base_minute, base_hour]
    times = [base_second, base_minute, base_hour]
    year, month, day = base_year, base_month, base_day

    for i, kind in enumerate(TIME_KINDS):
        resolved = schedule[kind].next(times[i])
        if resolved is None:
            times[: i + 1] = _first_times(schedule)[: i + 1]
            if i + 1 < len(times):
                times[i + 1] += 1
            else:
                day += 1
        else:
            times[i] = resolved
            if resolved > bases[i]:
                times[:i] = _first_times(schedule)[:i]

    days = schedule[FieldKind.DAY_OF_MONTH]
    months = schedule[FieldKind.MONTH]
    end_date = (end.year, end.month, end.day)

    day = days.next(day)
    while True:
        if day is None:
            times = _first_times(schedule)
            day = days.first()
            month += 1
        elif day > base_day:
            times = _first_times(schedule)

        resolved = months.next(month)
        if resolved is None:
            times = _first_times(schedule)
            day = days.first()
            month = months.first()
            year += 1
        elif resolved > base_month:
            times = _first_times(schedule)
            day = days.first()
            month = resolved
        else:
            month = resolved

        if year > MAXYEAR:
            return None

        if day > monthrange(year, month)[1]:
            if (year, month, day) >= end_date:
                return None
            day = None
            continue

        break

    second, minute, hour = times
    return year, month, day, hour, minute, second


def next_occurrence(schedule: Schedule, start: datetime, end: datetime) -> datetime:
    """
    Return the earliest instant strictly after ``start`` matching every
    field of ``schedule``, or ``end`` itself when there is none before it.

    The result carries ``start.tzinfo`` unchanged; no zone conversion is
    done. Compare the result with ``end`` to tell "found" from "not found".
    """
    floor = (
        start.year,
        start.month,
        start.day,
        start.hour,
        start.minute,
        start.second + 1,
    )
    weekdays = schedule[FieldKind.DAY_OF_WEEK]

    while True:
        fields = _resolve_date_time(schedule, floor, end)
        if fields is None:
            return end

        candidate = datetime(*fields, tzinfo=start.tzinfo)
        if candidate >= end:
            return end

        if weekdays.contains(cron_weekday(candidate)):
            return candidate

        # wrong weekday: search again from the start of the next day
        try:
            next_day = candidate.date() + timedelta(days=1)
        except OverflowError:
            return end
        floor = (next_day.year, next_day.month, next_day.day, 0, 0, 0)


def default_end(start: datetime) -> datetime:
    return datetime.max.replace(tzinfo=start.tzinfo)


def next_fire(
    expression: str,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    clock: Clock = local_now,
) -> datetime:
    """
    Next fire time of a cron expression.

    Args:
        expression (str): 5 or 6 whitespace separated cron fields.
        start (datetime, optional): search floor, exclusive. Defaults to
            ``clock()``.
        end (datetime, optional): exclusive upper bound. Defaults to
            ``datetime.max`` with ``start``'s tzinfo.
        clock (callable, optional): zero-argument "now" provider.

    Returns:
        datetime: the next match, or ``end`` when nothing matches before it.
    """
    schedule = parse_expression(expression)
    if start is None:
        start = clock()
    if end is None:
        end = default_end(start)
    return next_occurrence(schedule, start, end)


def iter_fires(
    expression: str,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    clock: Clock = local_now,
    count: Optional[int] = None,
) -> Iterator[datetime]:
    """
    Yield successive fire times, each fed back as the next search floor.

    Stops when the end bound is reached or after ``count`` results. The
    expression is parsed once, here, so a bad expression raises before
    iteration begins.
    """
    schedule = parse_expression(expression)
    current = clock() if start is None else start
    if end is None:
        end = default_end(current)
    return iter_occurrences(schedule, current, end, count)


def iter_occurrences(
    schedule: Schedule,
    start: datetime,
    end: datetime,
    count: Optional[int] = None,
) -> Iterator[datetime]:
    """Yield successive matches of an already parsed schedule after start."""
    current = start
    produced = 0
    while count is None or produced < count:
        current = next_occurrence(schedule, current, end)
        if current == end:
            return
        yield current
        produced += 1
