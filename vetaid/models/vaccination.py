# vetaid/models/vaccination.py
from dataclasses import dataclass, field, asdict
from typing import Optional, List, Dict, Any
import logging

from vetaid.models.animal import AnimalSpecies, Sex, parse_species

# 임신 여부는 암컷이면서 이 나이(년)를 초과할 때만 의미가 있습니다.
PREGNANCY_MIN_AGE = 1.5

def _to_number(value, record_id) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        logging.warning(f"Invalid age value '{value}' for vaccination {record_id}. Defaulting to 0.")
        return 0

@dataclass
class Dose:
    """접종 일정 내의 1회 투여 이벤트."""
    number: int        # 1부터 시작하는 회차
    date: str          # ISO 타임스탬프
    administered: bool = False

@dataclass
class Vaccination:
    """
    'vaccinations' 컬렉션의 레코드 구조.
    필드명은 저장/내보내기 JSON 형식(camelCase)과 동일합니다.
    """
    id: str
    animalId: str
    age: float
    sex: Sex
    ownerPhone: str
    vaccineTime: str   # 1차 접종 ISO 타임스탬프
    vaccineType: str
    species: AnimalSpecies
    doses: List[Dose] = field(default_factory=list)
    isPregnant: Optional[bool] = None
    notes: Optional[str] = None

    @staticmethod
    def pregnancy_applies(sex: Sex, age: float) -> bool:
        return sex is Sex.FEMALE and age > PREGNANCY_MIN_AGE

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Vaccination":
        """
        저장소에서 읽은 딕셔너리로부터 Vaccination 인스턴스를 생성합니다.
        문자열로 저장된 Enum 값과 doses 배열을 자동으로 변환합니다.
        """
        processed_data = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        processed_data['id'] = str(data.get('id', ''))
        for key in ('animalId', 'ownerPhone', 'vaccineTime', 'vaccineType'):
            processed_data.setdefault(key, '')
        processed_data['age'] = _to_number(processed_data.get('age'), data.get('id'))

        sex_str = processed_data.get('sex')
        try:
            processed_data['sex'] = Sex(sex_str)
        except ValueError:
            logging.warning(f"Invalid Sex value '{sex_str}' for vaccination {data.get('id')}. Defaulting to male.")
            processed_data['sex'] = Sex.MALE

        processed_data['species'] = parse_species(processed_data.get('species'), data.get('id'))
        processed_data['doses'] = [
            Dose(number=d.get('number', index + 1), date=d.get('date', ''),
                 administered=bool(d.get('administered', False)))
            for index, d in enumerate(processed_data.get('doses') or [])
            if isinstance(d, dict)
        ]
        return cls(**processed_data)

    def to_dict(self) -> Dict[str, Any]:
        """저장용 딕셔너리로 변환합니다. 값이 없는 선택 필드는 생략합니다."""
        data = asdict(self)
        data['sex'] = self.sex.value
        data['species'] = self.species.value
        if self.isPregnant is None:
            data.pop('isPregnant')
        if self.notes is None:
            data.pop('notes')
        return data
