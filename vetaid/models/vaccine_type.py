# vetaid/models/vaccine_type.py
from dataclasses import dataclass, field
from typing import List, Dict, Any

from vetaid.models.animal import AnimalSpecies, parse_species

@dataclass
class VaccineType:
    """'vaccine_types' 카탈로그 레코드. 백신별 기본 접종 횟수/간격을 보관합니다."""
    id: str
    name: str
    totalDoses: int = 1
    daysInterval: int = 0
    targetAnimals: List[AnimalSpecies] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VaccineType":
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            totalDoses=data.get('totalDoses', 1),
            daysInterval=data.get('daysInterval', 0),
            targetAnimals=[parse_species(s, data.get('id')) for s in data.get('targetAnimals') or []]
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'totalDoses': self.totalDoses,
            'daysInterval': self.daysInterval,
            'targetAnimals': [s.value for s in self.targetAnimals],
        }
