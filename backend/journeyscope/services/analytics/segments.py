from __future__ import annotations

import calendar
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
import math

from journeyscope.schemas.common import SegmentType, TimePeriod
from journeyscope.services.analytics.records import ResponseRecord
from journeyscope.utils.timezone import ensure_aware, reporting_zone, to_reporting_time, utc_now

END_OF_DAY = time(23, 59, 59, 999000)
UNKNOWN_BATCH = 'unknown'


@dataclass(frozen=True, slots=True)
class TimeSegment:
    id: str
    type: SegmentType
    start_date: datetime
    end_date: datetime
    label: str
    response_count: int


@dataclass(slots=True)
class _Bucket:
    start: datetime
    end: datetime
    count: int = 0


def segment_records(
    records: Sequence[ResponseRecord],
    mode: SegmentType,
    *,
    reference_time: datetime | None = None,
) -> list[TimeSegment]:
    if reference_time is None:
        reference_time = utc_now()
    if not records:
        return []
    if mode == SegmentType.batch:
        return _batch_segments(records, reference_time)
    return _period_segments(records, mode, reference_time)


def _batch_segments(records: Sequence[ResponseRecord], reference_time: datetime) -> list[TimeSegment]:
    buckets: dict[str, _Bucket] = {}
    for record in records:
        batch_id = segment_key(record, SegmentType.batch, reference_time=reference_time)
        created = _created_at(record, reference_time)
        bucket = buckets.get(batch_id)
        if bucket is None:
            bucket = buckets[batch_id] = _Bucket(start=created, end=created)
        bucket.count += 1
        if created < bucket.start:
            bucket.start = created
        if created > bucket.end:
            bucket.end = created

    day_counts: dict[date, int] = {}
    for bucket in buckets.values():
        day = to_reporting_time(bucket.end).date()
        day_counts[day] = day_counts.get(day, 0) + 1

    segments: list[TimeSegment] = []
    for batch_id, bucket in buckets.items():
        local_ts = to_reporting_time(bucket.end)
        if day_counts[local_ts.date()] > 1:
            when = f"{local_ts:%Y-%m-%d} {local_ts:%H:%M:%S}"
        else:
            when = f"{local_ts:%Y-%m-%d}"
        segments.append(
            TimeSegment(
                id=batch_id,
                type=SegmentType.batch,
                start_date=bucket.start,
                end_date=bucket.end,
                label=f'Batch {when} ({bucket.count} responses)',
                response_count=bucket.count,
            )
        )
    # the batch timestamp is its latest response
    segments.sort(key=lambda s: (s.end_date, s.id), reverse=True)
    return segments


def _period_segments(
    records: Sequence[ResponseRecord],
    mode: SegmentType,
    reference_time: datetime,
) -> list[TimeSegment]:
    buckets: dict[str, _Bucket] = {}
    for record in records:
        local = to_reporting_time(_created_at(record, reference_time))
        if mode == SegmentType.week:
            key, start, end = week_bounds(local.date())
        else:
            key, start, end = month_bounds(local.date())
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = _Bucket(start=start, end=end)
        bucket.count += 1

    segments = [
        TimeSegment(
            id=key,
            type=mode,
            start_date=bucket.start,
            end_date=bucket.end,
            label=_period_label(mode, bucket),
            response_count=bucket.count,
        )
        for key, bucket in buckets.items()
    ]
    segments.sort(key=lambda s: s.start_date, reverse=True)
    return segments


def week_bounds(day: date) -> tuple[str, datetime, datetime]:
    """Monday-to-Sunday bounds of the week containing ``day``.

    Weeks are numbered within their month (``ceil(monday.day / 7)``), so the month is part
    of the key.
    """
    monday = day - timedelta(days=day.weekday())
    zone = reporting_zone()
    start = datetime.combine(monday, time.min, tzinfo=zone)
    end = datetime.combine(monday + timedelta(days=6), END_OF_DAY, tzinfo=zone)
    week_of_month = math.ceil(monday.day / 7)
    return f'{monday.year}-{monday.month:02d}-W{week_of_month:02d}', start, end


def month_bounds(day: date) -> tuple[str, datetime, datetime]:
    zone = reporting_zone()
    last_day = calendar.monthrange(day.year, day.month)[1]
    start = datetime.combine(day.replace(day=1), time.min, tzinfo=zone)
    end = datetime.combine(day.replace(day=last_day), END_OF_DAY, tzinfo=zone)
    return f'{day.year}-{day.month:02d}', start, end


def _period_label(mode: SegmentType, bucket: _Bucket) -> str:
    if mode == SegmentType.week:
        return f'Week of {bucket.start:%Y-%m-%d} ({bucket.count} responses)'
    return f'{calendar.month_name[bucket.start.month]} {bucket.start.year} ({bucket.count} responses)'


def find_previous_segment(segments: Sequence[TimeSegment], segment_id: str) -> TimeSegment | None:
    for idx, segment in enumerate(segments):
        if segment.id == segment_id:
            return segments[idx + 1] if idx + 1 < len(segments) else None
    raise LookupError(f'Unknown segment {segment_id}')


def group_by_period(
    records: Sequence[ResponseRecord],
    period: TimePeriod,
    *,
    reference_time: datetime | None = None,
) -> dict[str, list[ResponseRecord]]:
    if reference_time is None:
        reference_time = utc_now()
    grouped: dict[str, list[ResponseRecord]] = {}
    for record in records:
        day = to_reporting_time(_created_at(record, reference_time)).date()
        if period == TimePeriod.weekly:
            key = (day - timedelta(days=day.weekday())).isoformat()
        else:
            key = f'{day.year}-{day.month:02d}'
        grouped.setdefault(key, []).append(record)
    return grouped


def date_range_for_period(
    period: TimePeriod,
    *,
    periods: int = 12,
    now: datetime | None = None,
) -> tuple[datetime, datetime]:
    if now is None:
        now = utc_now()
    today = to_reporting_time(now).date()
    zone = reporting_zone()
    if period == TimePeriod.weekly:
        monday = today - timedelta(days=today.weekday())
        first = monday - timedelta(weeks=max(periods, 1) - 1)
    else:
        months_back = max(periods, 1) - 1
        year, month = today.year, today.month - months_back
        while month < 1:
            month += 12
            year -= 1
        first = date(year, month, 1)
    start = datetime.combine(first, time.min, tzinfo=zone)
    return start.astimezone(timezone.utc), now


def _created_at(record: ResponseRecord, reference_time: datetime) -> datetime:
    return ensure_aware(record.created_at) if record.created_at is not None else ensure_aware(reference_time)


def segment_key(record: ResponseRecord, mode: SegmentType, *, reference_time: datetime) -> str:
    """Id of the segment ``segment_records`` places ``record`` in."""
    if mode == SegmentType.batch:
        return record.batch_id or UNKNOWN_BATCH
    day = to_reporting_time(_created_at(record, reference_time)).date()
    if mode == SegmentType.week:
        return week_bounds(day)[0]
    return month_bounds(day)[0]
