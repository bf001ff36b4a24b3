# vetaid/models/prescription.py
from dataclasses import dataclass, field
import logging
from typing import List, Dict, Any

from vetaid.models.animal import AnimalSpecies, parse_species
from vetaid.models.drug import AdministrationRoute

@dataclass
class PrescribedDrug:
    """
    처방 시점의 약물 스냅샷.
    drugId 는 Drug 에 대한 약한 참조이며, calculatedDose(mg)는 생성 시점에 고정됩니다.
    약물이 나중에 수정/삭제되어도 다시 계산하지 않습니다.
    """
    drugId: str
    route: AdministrationRoute
    calculatedDose: float

@dataclass
class Prescription:
    """'prescriptions' 컬렉션의 레코드 구조."""
    id: str
    animalId: str
    species: AnimalSpecies
    weight: float      # kg
    date: str          # ISO 타임스탬프
    drugs: List[PrescribedDrug] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Prescription":
        """저장된 딕셔너리로부터 Prescription 인스턴스를 생성합니다. 읽을 수 없는 약물 줄은 경고 후 건너뜁니다."""
        drugs = []
        for d in data.get('drugs') or []:
            try:
                drugs.append(PrescribedDrug(
                    drugId=str(d['drugId']),
                    route=AdministrationRoute(d.get('route')),
                    calculatedDose=float(d.get('calculatedDose', 0))
                ))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logging.warning(f"Unreadable drug line {d!r} ignored for prescription {data.get('id')}: {e}")

        return cls(
            id=str(data.get('id', '')),
            animalId=data.get('animalId', ''),
            species=parse_species(data.get('species'), data.get('id')),
            weight=data.get('weight', 0),
            date=data.get('date', ''),
            drugs=drugs
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'animalId': self.animalId,
            'species': self.species.value,
            'weight': self.weight,
            'drugs': [
                {'drugId': d.drugId, 'route': d.route.value, 'calculatedDose': d.calculatedDose}
                for d in self.drugs
            ],
            'date': self.date,
        }
