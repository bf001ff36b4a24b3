# vetaid/models/procedure.py
from dataclasses import dataclass, field, asdict
from typing import List, Dict, Any

from vetaid.models.animal import AnimalSpecies, parse_species

@dataclass
class AgeRange:
    min: float
    max: float

@dataclass
class TestProcedure:
    """
    'tests' 컬렉션의 레코드 구조.
    steps 는 시술 순서 그대로 저장됩니다.
    """
    __test__ = False  # pytest 수집 대상 아님

    id: str
    name: str
    steps: List[str] = field(default_factory=list)
    targetAnimals: List[AnimalSpecies] = field(default_factory=list)
    ageRange: AgeRange = field(default_factory=lambda: AgeRange(min=0, max=20))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TestProcedure":
        age_range = data.get('ageRange') if isinstance(data.get('ageRange'), dict) else {}
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            steps=list(data.get('steps') or []),
            targetAnimals=[parse_species(s, data.get('id')) for s in data.get('targetAnimals') or []],
            ageRange=AgeRange(min=age_range.get('min', 0), max=age_range.get('max', 20))
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['targetAnimals'] = [s.value for s in self.targetAnimals]
        return data
