# vetaid/utils/test_datetime_utils.py
"""
통합 시간 관리 유틸리티 기능 테스트

사용법: python -m pytest vetaid/utils/test_datetime_utils.py -v
"""

import pytest
from datetime import datetime, date, timezone, timedelta
from dateutil import tz

from vetaid.utils import datetime_utils
from vetaid.utils.datetime_utils import DateTimeUtils


@pytest.fixture
def utc_local(monkeypatch):
    """현지 시간대를 UTC로 고정"""
    monkeypatch.setattr(datetime_utils, 'LOCAL_TZ', tz.UTC)


@pytest.fixture
def new_york_local(monkeypatch):
    """DST가 있는 시간대로 고정"""
    monkeypatch.setattr(datetime_utils, 'LOCAL_TZ', tz.gettz('America/New_York'))


def test_parse_iso_datetime():
    """ISO 포맷 파싱 테스트"""
    test_cases = [
        "2024-01-15T10:30:00Z",
        "2024-01-15T10:30:00.123Z",
        "2024-01-15T10:30:00+09:00",
        "2024-01-15T10:30:00"
    ]

    for iso_string in test_cases:
        dt = DateTimeUtils.parse_iso_datetime(iso_string)
        assert isinstance(dt, datetime)
        assert dt.tzinfo is not None  # timezone-aware 여야 함


def test_to_iso_string_uses_millisecond_utc_format():
    dt = datetime(2025, 1, 1, 9, 0, tzinfo=timezone(timedelta(hours=9)))
    assert DateTimeUtils.to_iso_string(dt) == "2025-01-01T00:00:00.000Z"


def test_add_days_scenario(utc_local):
    assert DateTimeUtils.add_days("2025-01-01T09:00:00.000Z", 7) == "2025-01-08T09:00:00.000Z"
    assert DateTimeUtils.add_days("2025-01-31T09:00:00.000Z", 1) == "2025-02-01T09:00:00.000Z"
    assert DateTimeUtils.add_days("2025-01-08T09:00:00.000Z", -3) == "2025-01-05T09:00:00.000Z"


def test_add_days_keeps_wall_clock_across_dst(new_york_local):
    """2025-03-09 은 미국 동부의 서머타임 시작일"""
    first = DateTimeUtils.combine_date_and_time("2025-03-08", "09:00")
    assert first == "2025-03-08T14:00:00.000Z"  # EST (UTC-5)

    next_day = DateTimeUtils.add_days(first, 1)
    # 24시간을 더했다면 10:00 EDT 가 되어야 하지만, 달력상 하루는 09:00 EDT
    assert next_day == "2025-03-09T13:00:00.000Z"

    local = DateTimeUtils.parse_iso_datetime(next_day).astimezone(datetime_utils.LOCAL_TZ)
    assert (local.hour, local.minute) == (9, 0)


def test_combine_date_and_time(utc_local):
    assert DateTimeUtils.combine_date_and_time("2025-01-01", "09:30") == "2025-01-01T09:30:00.000Z"

    with pytest.raises(ValueError):
        DateTimeUtils.combine_date_and_time("2025-13-01", "09:30")
    with pytest.raises(ValueError):
        DateTimeUtils.combine_date_and_time("2025-01-01", "25:00")
    with pytest.raises(ValueError):
        DateTimeUtils.combine_date_and_time("01/01/2025", "09:30")


def test_is_today_uses_calendar_date(utc_local):
    now = datetime(2025, 5, 10, 23, 59, tzinfo=tz.UTC)
    assert DateTimeUtils.is_today("2025-05-10T00:00:00.000Z", now=now)
    assert not DateTimeUtils.is_today("2025-05-11T00:00:00.000Z", now=now)
    assert not DateTimeUtils.is_today("2025-05-09T23:59:59.000Z", now=now)


def test_is_in_next_three_days(utc_local):
    now = datetime(2025, 5, 10, 12, 0, tzinfo=tz.UTC)
    assert DateTimeUtils.is_in_next_three_days("2025-05-10T12:00:00.000Z", now=now)
    assert DateTimeUtils.is_in_next_three_days("2025-05-13T12:00:00.000Z", now=now)
    assert not DateTimeUtils.is_in_next_three_days("2025-05-13T12:00:01.000Z", now=now)
    assert not DateTimeUtils.is_in_next_three_days("2025-05-10T11:59:59.000Z", now=now)


@pytest.mark.parametrize("year, month", [
    (2025, 1), (2025, 2), (2026, 2), (2024, 2), (2025, 6), (2025, 12), (2015, 2)
])
def test_get_calendar_dates_shape(year, month):
    dates = DateTimeUtils.get_calendar_dates(year, month)

    assert len(dates) % 7 == 0
    assert dates[0].weekday() == 6   # 일요일
    assert dates[-1].weekday() == 5  # 토요일

    # 해당 월의 날짜가 빠짐없이 연속으로 포함되어야 함
    month_days = [d for d in dates if d.month == month and d.year == year]
    _, last = DateTimeUtils.get_month_range(year, month)
    assert [d.day for d in month_days] == list(range(1, last.day + 1))
    start = dates.index(month_days[0])
    assert dates[start:start + len(month_days)] == month_days


def test_get_calendar_dates_padding():
    # 2025-01-01 은 수요일 -> 앞쪽 3일, 2025-01-31 은 금요일 -> 뒤쪽 1일
    dates = DateTimeUtils.get_calendar_dates(2025, 1)
    assert dates[0] == date(2024, 12, 29)
    assert dates[-1] == date(2025, 2, 1)
    assert len(dates) == 35

    # 2015-02 는 일요일에 시작해 토요일에 끝나므로 패딩이 없음
    assert len(DateTimeUtils.get_calendar_dates(2015, 2)) == 28


def test_days_between():
    assert DateTimeUtils.days_between("2025-01-01T09:00:00.000Z", "2025-01-08T09:00:00.000Z") == 7
    assert DateTimeUtils.days_between("2025-01-01T09:00:00.000Z", "2025-01-08T08:00:00.000Z") == 7


def test_format_helpers(utc_local):
    assert DateTimeUtils.format_date("2025-01-01T09:05:00.000Z") == "Jan 1, 2025, 09:05 AM"
    assert DateTimeUtils.format_calendar_date("2025-01-01T21:05:00.000Z") == "Jan 1, 2025"
    assert DateTimeUtils.format_calendar_date(date(2025, 3, 2)) == "Mar 2, 2025"


def test_error_handling():
    """오류 처리 테스트"""
    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("invalid-date")

    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("")

    with pytest.raises(ValueError):
        DateTimeUtils.parse_date_string("2025-02-30")
