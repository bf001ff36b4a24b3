# vetaid/models/drug.py
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Any, Optional
import logging

from vetaid.models.animal import AnimalSpecies, parse_species

class AdministrationRoute(Enum):
    SC = "sc"
    IM = "im"
    ORAL = "oral"
    IV = "iv"
    AURAL = "aural"
    TOPICAL = "topical"

ROUTE_LABELS = {
    AdministrationRoute.SC: "Subcutaneous (S/C)",
    AdministrationRoute.IM: "Intramuscular (I/M)",
    AdministrationRoute.ORAL: "Oral",
    AdministrationRoute.IV: "Intravenous (I/V)",
    AdministrationRoute.AURAL: "Aural",
    AdministrationRoute.TOPICAL: "Topical",
}

@dataclass
class SpeciesDosage:
    species: AnimalSpecies
    dosage: float  # mg/kg

@dataclass
class Drug:
    """
    'drugs' 컬렉션의 레코드 구조.
    dosages 는 종별 mg/kg 용량표이며 종마다 최대 한 개의 항목을 가집니다.
    """
    id: str
    name: str
    dosages: List[SpeciesDosage] = field(default_factory=list)
    routes: List[AdministrationRoute] = field(default_factory=list)

    def dosage_for(self, species: AnimalSpecies) -> Optional[float]:
        for entry in self.dosages:
            if entry.species is species:
                return entry.dosage
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Drug":
        """저장된 딕셔너리로부터 Drug 인스턴스를 생성합니다. routes 가 없으면 빈 목록으로 초기화."""
        routes = []
        for value in data.get('routes') or []:
            try:
                routes.append(AdministrationRoute(value))
            except ValueError:
                logging.warning(f"Unknown route '{value}' ignored for drug {data.get('id')}")

        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            dosages=[
                SpeciesDosage(species=parse_species(d.get('species'), data.get('id')), dosage=d.get('dosage', 0))
                for d in data.get('dosages') or [] if isinstance(d, dict)
            ],
            routes=routes
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'dosages': [{'species': d.species.value, 'dosage': d.dosage} for d in self.dosages],
            'routes': [r.value for r in self.routes],
        }
