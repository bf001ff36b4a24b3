# vetaid/utils/calculators.py
"""
용량 계산 및 다회 접종 일정 생성 유틸리티

- 용량: calculatedDose(mg) = 종별 용량(mg/kg) * 체중(kg)
- 일정: dose[i].date = 1차 접종 시각 + i * 간격(일), 회차는 1부터
"""

import logging
from typing import List, Optional, Sequence, Tuple

from vetaid.models.animal import AnimalSpecies
from vetaid.models.drug import Drug, AdministrationRoute
from vetaid.models.vaccination import Dose
from vetaid.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)


def find_species_dosage(drug: Drug, species: AnimalSpecies) -> Optional[float]:
    """약물 용량표에서 해당 종의 mg/kg 용량을 찾습니다. 없으면 None."""
    return drug.dosage_for(species)


def calculate_dose(drug: Drug, species: AnimalSpecies, weight: float) -> float:
    """
    체중 기반 총 투여량(mg)을 계산합니다.

    Raises:
        LookupError: 약물에 해당 종의 용량 정보가 없는 경우
        ValueError: 체중이 0 이하인 경우
    """
    if weight is None or weight <= 0:
        raise ValueError("유효한 체중을 입력해야 약물을 추가할 수 있습니다.")

    dosage = find_species_dosage(drug, species)
    if dosage is None:
        raise LookupError(f"{drug.name}에는 {species.value}에 대한 용량 정보가 없습니다.")

    return dosage * weight


def default_route(drug: Drug) -> AdministrationRoute:
    """기본 투여 경로: 경구(oral)가 있으면 경구, 없으면 첫 번째 경로."""
    if not drug.routes:
        raise LookupError(f"{drug.name}에 등록된 투여 경로가 없습니다.")
    if AdministrationRoute.ORAL in drug.routes:
        return AdministrationRoute.ORAL
    return drug.routes[0]


def generate_dose_schedule(first_dose_time: str,
                           total_doses: int,
                           days_interval: int,
                           is_new_record: bool,
                           existing_doses: Optional[Sequence[Dose]] = None) -> List[Dose]:
    """
    다회 접종 일정을 생성합니다.

    Args:
        first_dose_time: 1차 접종 ISO 타임스탬프
        total_doses: 총 접종 횟수 (1 이상)
        days_interval: 접종 간격(일). total_doses > 1 이면 0보다 커야 함
        is_new_record: 신규 등록이면 True. 1차 접종은 입력 시점에 투여된 것으로 간주합니다.
        existing_doses: 수정 시 기존 접종 기록. 같은 회차의 투여 여부는 그대로 유지합니다.

    Returns:
        회차 순서대로 정렬된 Dose 목록
    """
    if total_doses is None or total_doses < 1:
        raise ValueError("최소 1회 이상의 접종이 필요합니다.")
    if total_doses > 1 and (days_interval is None or days_interval <= 0):
        raise ValueError("다회 접종에는 0보다 큰 접종 간격이 필요합니다.")

    existing_doses = list(existing_doses or [])
    doses = []
    for i in range(total_doses):
        dose_date = first_dose_time if i == 0 else DateTimeUtils.add_days(first_dose_time, i * days_interval)

        # 날짜만 다시 계산하고, 이미 기록된 투여 여부는 덮어쓰지 않음
        if i < len(existing_doses):
            administered = existing_doses[i].administered
        elif i == 0:
            administered = is_new_record
        else:
            administered = False

        doses.append(Dose(number=i + 1, date=dose_date, administered=administered))

    logger.debug(f"Generated {total_doses}-dose schedule from {first_dose_time} (interval {days_interval}d)")
    return doses


def derive_schedule_parameters(doses: Sequence[Dose]) -> Tuple[int, int]:
    """저장된 접종 기록에서 (총 횟수, 간격 일수)를 복원합니다. 수정 폼 초기값용."""
    if len(doses) >= 2:
        return len(doses), DateTimeUtils.days_between(doses[0].date, doses[1].date)
    return len(doses), 0
