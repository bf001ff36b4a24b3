# vetaid/utils/__init__.py
"""
유틸리티 모듈 패키지

이 패키지는 프로젝트 전체에서 공통으로 사용되는 날짜 처리 및 용량/일정 계산 함수들을 포함합니다.
"""

from .datetime_utils import (
    DateTimeUtils,
    now, today, parse_iso, to_iso,
    add_days, combine_date_and_time, get_calendar_dates
)
from .calculators import (
    calculate_dose, default_route, find_species_dosage,
    generate_dose_schedule, derive_schedule_parameters
)

__all__ = [
    'DateTimeUtils',
    'now', 'today', 'parse_iso', 'to_iso',
    'add_days', 'combine_date_and_time', 'get_calendar_dates',
    'calculate_dose', 'default_route', 'find_species_dosage',
    'generate_dose_schedule', 'derive_schedule_parameters'
]
