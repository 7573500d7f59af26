from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import date, datetime, timedelta, timezone

import pytest

from journeyscope.core.config import get_settings
from journeyscope.schemas.common import SegmentType, TimePeriod
from journeyscope.services.analytics.records import ResponseRecord
from journeyscope.services.analytics.segments import (
    date_range_for_period,
    find_previous_segment,
    group_by_period,
    month_bounds,
    segment_records,
    week_bounds,
)


def _record(created_at: datetime | None, batch_id: str | None = None) -> ResponseRecord:
    return ResponseRecord(company_id=1, answer_engine='ChatGPT', created_at=created_at, batch_id=batch_id)


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_batch_segments_cover_every_record_newest_first() -> None:
    records = [
        _record(_utc(2026, 10, 12, 10, 0), 'b1'),
        _record(_utc(2026, 10, 12, 11, 0), 'b1'),
        _record(_utc(2026, 10, 13, 9, 0)),
        _record(_utc(2026, 10, 14, 9, 0), 'b2'),
    ]

    segments = segment_records(records, SegmentType.batch)

    assert [s.id for s in segments] == ['b2', 'unknown', 'b1']
    assert sum(s.response_count for s in segments) == len(records)
    first_batch = segments[-1]
    assert first_batch.start_date == _utc(2026, 10, 12, 10, 0)
    assert first_batch.end_date == _utc(2026, 10, 12, 11, 0)
    assert first_batch.label == 'Batch 2026-10-12 (2 responses)'


def test_batches_on_the_same_day_get_a_time_in_the_label() -> None:
    records = [
        _record(_utc(2026, 10, 12, 8, 0), 'morning'),
        _record(_utc(2026, 10, 12, 18, 30), 'evening'),
    ]

    labels = [s.label for s in segment_records(records, SegmentType.batch)]

    assert labels == [
        'Batch 2026-10-12 18:30:00 (1 responses)',
        'Batch 2026-10-12 08:00:00 (1 responses)',
    ]


def test_week_bounds_start_on_monday() -> None:
    key, start, end = week_bounds(date(2026, 10, 14))

    assert key == '2026-10-W02'
    assert start == _utc(2026, 10, 12)
    assert start.weekday() == 0
    assert end == datetime(2026, 10, 18, 23, 59, 59, 999000, tzinfo=timezone.utc)
    assert end - start == timedelta(days=6, hours=23, minutes=59, seconds=59, milliseconds=999)


def test_month_bounds_handle_leap_years() -> None:
    key, start, end = month_bounds(date(2024, 2, 10))

    assert key == '2024-02'
    assert start == _utc(2024, 2, 1)
    assert end == datetime(2024, 2, 29, 23, 59, 59, 999000, tzinfo=timezone.utc)


def test_week_and_month_segments() -> None:
    records = [
        _record(_utc(2026, 9, 30, 12, 0)),
        _record(_utc(2026, 10, 1, 12, 0)),
        _record(_utc(2026, 10, 14, 12, 0)),
    ]

    weeks = segment_records(records, SegmentType.week)
    assert [s.id for s in weeks] == ['2026-10-W02', '2026-09-W04']
    assert [s.response_count for s in weeks] == [1, 2]
    assert weeks[0].label == 'Week of 2026-10-12 (1 responses)'

    months = segment_records(records, SegmentType.month)
    assert [s.id for s in months] == ['2026-10', '2026-09']
    assert months[0].label == 'October 2026 (2 responses)'


def test_missing_created_at_uses_reference_time() -> None:
    reference = _utc(2026, 10, 19, 9, 0)

    segments = segment_records([_record(None, 'b1')], SegmentType.batch, reference_time=reference)

    assert segments[0].start_date == reference
    assert segments[0].end_date == reference


def test_empty_input_has_no_segments() -> None:
    assert segment_records([], SegmentType.batch) == []
    assert segment_records([], SegmentType.week) == []


def test_find_previous_segment() -> None:
    records = [_record(_utc(2026, 10, 12), 'old'), _record(_utc(2026, 10, 14), 'new')]
    segments = segment_records(records, SegmentType.batch)

    assert find_previous_segment(segments, 'new').id == 'old'
    assert find_previous_segment(segments, 'old') is None
    with pytest.raises(LookupError):
        find_previous_segment(segments, 'missing')


def test_group_by_period_keys() -> None:
    records = [_record(_utc(2026, 10, 14)), _record(_utc(2026, 10, 18, 23)), _record(_utc(2026, 10, 19))]

    weekly = group_by_period(records, TimePeriod.weekly)
    assert {key: len(items) for key, items in weekly.items()} == {'2026-10-12': 2, '2026-10-19': 1}

    monthly = group_by_period(records, TimePeriod.monthly)
    assert list(monthly) == ['2026-10']


def test_date_range_for_period() -> None:
    now = _utc(2026, 10, 19, 12, 0)

    start, end = date_range_for_period(TimePeriod.weekly, now=now)
    assert start == _utc(2026, 8, 3)
    assert end == now

    start, _ = date_range_for_period(TimePeriod.monthly, now=now)
    assert start == _utc(2025, 11, 1)


@pytest.fixture
def reporting_timezone(monkeypatch: pytest.MonkeyPatch) -> Iterator[Callable[[str], None]]:
    def _use(name: str) -> None:
        monkeypatch.setenv('REPORTING_TIMEZONE', name)
        get_settings.cache_clear()

    yield _use
    monkeypatch.undo()
    get_settings.cache_clear()


@pytest.mark.parametrize(
    ('zone', 'week_id', 'week_start', 'timeline_key'),
    [
        ('UTC', '2026-10-W02', datetime(2026, 10, 12, tzinfo=timezone.utc), '2026-10-12'),
        # 23:30 UTC on Sunday is already Monday 01:30 in Berlin (CEST, UTC+2)
        ('Europe/Berlin', '2026-10-W03', datetime(2026, 10, 18, 22, tzinfo=timezone.utc), '2026-10-19'),
    ],
)
def test_week_segments_follow_reporting_timezone(
    reporting_timezone: Callable[[str], None],
    zone: str,
    week_id: str,
    week_start: datetime,
    timeline_key: str,
) -> None:
    reporting_timezone(zone)
    record = _record(_utc(2026, 10, 18, 23, 30))

    segments = segment_records([record], SegmentType.week)

    assert [s.id for s in segments] == [week_id]
    assert segments[0].start_date == week_start
    assert list(group_by_period([record], TimePeriod.weekly)) == [timeline_key]


def test_month_segments_follow_reporting_timezone_across_dst(reporting_timezone: Callable[[str], None]) -> None:
    reporting_timezone('Europe/Berlin')
    record = _record(_utc(2026, 3, 31, 22, 30))

    segments = segment_records([record], SegmentType.month)

    assert segments[0].id == '2026-04'
    assert segments[0].start_date == _utc(2026, 3, 31, 22)
    assert segments[0].end_date == datetime(2026, 4, 30, 21, 59, 59, 999000, tzinfo=timezone.utc)
    assert segments[0].label == 'April 2026 (1 responses)'
