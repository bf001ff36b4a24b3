# vetaid/utils/datetime_utils.py
"""
프로젝트 전체에서 일관된 시간/날짜 처리를 위한 중앙화된 유틸리티 모듈

이 모듈의 목적:
1. 모든 시간 관련 작업을 표준화
2. 저장 포맷(UTC ISO 문자열, 밀리초 + 'Z')을 하나로 통일
3. 달력/접종 일정 계산은 현지 시간(local time) 기준으로 처리
4. DST 경계에서도 '달력상 N일 뒤'가 정확하도록 보장
"""

import logging
import math
import re
from datetime import datetime, date, timezone
from typing import Union, List, Tuple, Optional
from dateutil import parser as dateutil_parser
from dateutil import tz
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

# 접종 시각/달력은 사용자의 현지 시간대를 기준으로 계산합니다.
LOCAL_TZ = tz.tzlocal()

DATE_PATTERN = re.compile(r'^(\d{4})-(\d{2})-(\d{2})$')
TIME_PATTERN = re.compile(r'^(\d{1,2}):(\d{2})$')

Timestamp = Union[str, datetime]


def _local_tz():
    # 테스트에서 monkeypatch 할 수 있도록 호출 시점에 조회
    return LOCAL_TZ


class DateTimeUtils:
    """시간/날짜 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 timezone-aware datetime(현지 시간대)으로 반환"""
        return datetime.now(timezone.utc).astimezone(_local_tz())

    @staticmethod
    def today() -> date:
        """오늘 날짜(현지 기준)를 반환"""
        return DateTimeUtils.now().date()

    @staticmethod
    def parse_iso_datetime(iso_string: str) -> datetime:
        """
        ISO 포맷 문자열을 datetime 객체로 파싱

        지원 포맷:
        - 2024-01-15T10:30:00Z
        - 2024-01-15T10:30:00.123Z
        - 2024-01-15T10:30:00+09:00
        - 2024-01-15T10:30:00 (현지 시간으로 간주)
        """
        try:
            if not iso_string:
                raise ValueError("빈 문자열은 파싱할 수 없습니다")

            # 'Z' 접미사 처리 (UTC 표시)
            if iso_string.endswith('Z'):
                iso_string = iso_string[:-1] + '+00:00'

            dt = dateutil_parser.isoparse(iso_string)

            # timezone-naive인 경우 현지 시간으로 간주
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=_local_tz())

            return dt

        except Exception as e:
            logger.error(f"ISO datetime 파싱 실패: {iso_string} - {e}")
            raise ValueError(f"잘못된 ISO 날짜 형식입니다: {iso_string}")

    @staticmethod
    def to_datetime(value: Timestamp) -> datetime:
        """문자열 또는 datetime을 timezone-aware datetime으로 통일"""
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.replace(tzinfo=_local_tz())
            return value
        return DateTimeUtils.parse_iso_datetime(value)

    @staticmethod
    def parse_date_string(date_string: str) -> date:
        """YYYY-MM-DD 형식의 날짜 문자열을 date 객체로 파싱"""
        match = DATE_PATTERN.match(date_string or '')
        if not match:
            raise ValueError(f"잘못된 날짜 형식입니다: {date_string}")
        try:
            year, month, day = (int(part) for part in match.groups())
            return date(year, month, day)
        except ValueError as e:
            logger.error(f"날짜 문자열 파싱 실패: {date_string} - {e}")
            raise ValueError(f"잘못된 날짜 형식입니다: {date_string}")

    @staticmethod
    def to_iso_string(dt: datetime) -> str:
        """datetime 객체를 저장용 ISO 문자열(UTC, 밀리초, 'Z')로 변환"""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=_local_tz())
        dt = dt.astimezone(timezone.utc)
        return dt.isoformat(timespec='milliseconds').replace('+00:00', 'Z')

    @staticmethod
    def to_date_string(d: date) -> str:
        """date 객체를 YYYY-MM-DD 형식 문자열로 변환"""
        return d.strftime('%Y-%m-%d')

    @staticmethod
    def local_date(value: Timestamp) -> date:
        """타임스탬프가 현지 달력상 어느 날짜인지 반환"""
        return DateTimeUtils.to_datetime(value).astimezone(_local_tz()).date()

    @staticmethod
    def add_days(value: Timestamp, days: int) -> str:
        """
        타임스탬프에 달력상 N일을 더합니다.

        24시간 배수가 아니라 현지 벽시계 시각을 유지하므로
        DST 전환일을 지나도 접종 시각이 한 시간 밀리지 않습니다.
        """
        local = DateTimeUtils.to_datetime(value).astimezone(_local_tz())
        shifted = local.replace(tzinfo=None) + relativedelta(days=days)
        shifted = tz.resolve_imaginary(shifted.replace(tzinfo=_local_tz()))
        return DateTimeUtils.to_iso_string(shifted)

    @staticmethod
    def combine_date_and_time(date_string: str, time_string: str) -> str:
        """YYYY-MM-DD 와 HH:MM 입력을 현지 시각 기준 ISO 문자열로 합칩니다."""
        d = DateTimeUtils.parse_date_string(date_string)
        match = TIME_PATTERN.match(time_string or '')
        if not match:
            raise ValueError(f"잘못된 시간 형식입니다: {time_string}")
        hours, minutes = int(match.group(1)), int(match.group(2))
        if hours > 23 or minutes > 59:
            raise ValueError(f"잘못된 시간 형식입니다: {time_string}")

        combined = datetime(d.year, d.month, d.day, hours, minutes, tzinfo=_local_tz())
        return DateTimeUtils.to_iso_string(tz.resolve_imaginary(combined))

    @staticmethod
    def is_same_day(dt1: Union[date, datetime], dt2: Union[date, datetime]) -> bool:
        """두 날짜가 같은 날인지 확인"""
        if isinstance(dt1, datetime):
            dt1 = dt1.date()
        if isinstance(dt2, datetime):
            dt2 = dt2.date()
        return dt1 == dt2

    @staticmethod
    def is_today(value: Timestamp, now: Optional[datetime] = None) -> bool:
        """달력상 오늘인지 확인 (시/분 단위는 무시)"""
        now = now or DateTimeUtils.now()
        return DateTimeUtils.local_date(value) == DateTimeUtils.local_date(now)

    @staticmethod
    def is_in_next_three_days(value: Timestamp, now: Optional[datetime] = None) -> bool:
        """지금부터 달력상 3일 뒤까지(양 끝 포함)에 속하는지 확인"""
        now = DateTimeUtils.to_datetime(now or DateTimeUtils.now())
        target = DateTimeUtils.to_datetime(value)
        three_days_later = DateTimeUtils.to_datetime(DateTimeUtils.add_days(now, 3))
        return now <= target <= three_days_later

    @staticmethod
    def days_between(start: Timestamp, end: Timestamp) -> int:
        """두 타임스탬프 사이의 경과 일수 (올림)"""
        delta = DateTimeUtils.to_datetime(end) - DateTimeUtils.to_datetime(start)
        return math.ceil(delta.total_seconds() / 86400)

    @staticmethod
    def get_month_range(year: int, month: int) -> Tuple[date, date]:
        """특정 년월의 첫째 날과 마지막 날을 반환"""
        try:
            start_date = date(year, month, 1)
            end_date = start_date + relativedelta(months=1, days=-1)
            return start_date, end_date
        except Exception as e:
            logger.error(f"월 범위 계산 실패: {year}-{month} - {e}")
            raise ValueError(f"월 범위를 계산할 수 없습니다: {year}-{month}")

    @staticmethod
    def get_calendar_dates(year: int, month: int) -> List[date]:
        """
        월간 달력 그리드에 표시할 날짜 목록을 생성합니다. (month는 1~12)

        - 주는 일요일에 시작해서 토요일에 끝납니다.
        - 1일 앞쪽은 이전 달의 날짜로, 말일 뒤쪽은 다음 달의 날짜로 채웁니다.
        - 결과 길이는 항상 7의 배수입니다.
        """
        first_day, last_day = DateTimeUtils.get_month_range(year, month)

        # date.weekday()는 월요일=0 이므로 일요일=0 기준으로 변환
        leading = (first_day.weekday() + 1) % 7
        trailing = 6 - (last_day.weekday() + 1) % 7

        start = first_day - relativedelta(days=leading)
        total = leading + last_day.day + trailing
        return [start + relativedelta(days=offset) for offset in range(total)]

    @staticmethod
    def format_date(value: Timestamp) -> str:
        """표시용 날짜+시간 (예: Jan 1, 2025, 09:00 AM)"""
        local = DateTimeUtils.to_datetime(value).astimezone(_local_tz())
        return f"{local.strftime('%b')} {local.day}, {local.year}, {local.strftime('%I:%M %p')}"

    @staticmethod
    def format_calendar_date(value: Union[Timestamp, date]) -> str:
        """표시용 날짜 (예: Jan 1, 2025)"""
        if isinstance(value, date) and not isinstance(value, datetime):
            d = value
        else:
            d = DateTimeUtils.local_date(value)
        return f"{d.strftime('%b')} {d.day}, {d.year}"

    @staticmethod
    def get_today_string() -> str:
        """오늘 날짜를 YYYY-MM-DD 형식으로 반환 (폼 기본값)"""
        return DateTimeUtils.to_date_string(DateTimeUtils.today())

    @staticmethod
    def get_current_time() -> str:
        """현재 시각을 HH:MM 형식으로 반환 (폼 기본값)"""
        return DateTimeUtils.now().strftime('%H:%M')


# 편의를 위한 글로벌 함수들
def now() -> datetime:
    """현재 시간 반환"""
    return DateTimeUtils.now()

def today() -> date:
    """오늘 날짜 반환"""
    return DateTimeUtils.today()

def parse_iso(iso_string: str) -> datetime:
    """ISO 문자열을 datetime으로 파싱"""
    return DateTimeUtils.parse_iso_datetime(iso_string)

def to_iso(dt: datetime) -> str:
    """datetime을 저장용 ISO 문자열로 변환"""
    return DateTimeUtils.to_iso_string(dt)

def add_days(value: Timestamp, days: int) -> str:
    """달력상 N일 더하기"""
    return DateTimeUtils.add_days(value, days)

def combine_date_and_time(date_string: str, time_string: str) -> str:
    """날짜/시간 입력을 ISO 문자열로 합치기"""
    return DateTimeUtils.combine_date_and_time(date_string, time_string)

def get_calendar_dates(year: int, month: int) -> List[date]:
    """월간 달력 그리드 생성"""
    return DateTimeUtils.get_calendar_dates(year, month)
