# vetaid/api/drugs/services.py
import logging
import uuid
from typing import Dict, Any, List, Optional

from vetaid.api.common import matches_term
from vetaid.models.animal import AnimalSpecies, parse_species
from vetaid.models.drug import Drug, SpeciesDosage, AdministrationRoute
from vetaid.services.record_store import RecordStore

COLLECTION = 'drugs'

class DrugService:
    """
    약물 카탈로그(종별 mg/kg 용량, 투여 경로) 관리 서비스.
    처방은 약물 ID만 참조하므로 약물을 삭제해도 처방 기록은 그대로 남습니다.
    """
    def __init__(self, record_store: RecordStore):
        self.record_store = record_store

    def list_drugs(self, term: Optional[str] = None, species: Optional[AnimalSpecies] = None) -> List[Drug]:
        drugs = [Drug.from_dict(r) for r in self.record_store.get_all(COLLECTION)]
        return [
            d for d in drugs
            if matches_term(term, [d.name]) and (species is None or d.dosage_for(species) is not None)
        ]

    def find_drug(self, drug_id: str) -> Optional[Drug]:
        record = self.record_store.get(COLLECTION, drug_id)
        return Drug.from_dict(record) if record else None

    def get_drug(self, drug_id: str) -> Drug:
        drug = self.find_drug(drug_id)
        if drug is None:
            raise FileNotFoundError("해당 ID의 약물을 찾을 수 없습니다.")
        return drug

    def _build(self, drug_id: str, form: Dict[str, Any]) -> Drug:
        routes: List[AdministrationRoute] = []
        for value in form['routes']:
            route = AdministrationRoute(value)
            if route not in routes:
                routes.append(route)
        return Drug(
            id=drug_id,
            name=form['name'],
            dosages=[SpeciesDosage(species=parse_species(d['species']), dosage=d['dosage']) for d in form['dosages']],
            routes=routes
        )

    def create_drug(self, form: Dict[str, Any]) -> Drug:
        drug = self._build(str(uuid.uuid4()), form)
        self.record_store.save(COLLECTION, drug.to_dict())
        logging.info(f"Drug '{drug.name}' created for {len(drug.dosages)} species")
        return drug

    def update_drug(self, drug_id: str, form: Dict[str, Any]) -> Drug:
        self.get_drug(drug_id)
        drug = self._build(drug_id, form)
        self.record_store.save(COLLECTION, drug.to_dict())
        return drug

    def delete_drug(self, drug_id: str) -> None:
        self.get_drug(drug_id)
        self.record_store.delete(COLLECTION, drug_id)
        logging.info(f"Drug {drug_id} deleted (existing prescriptions keep their dose snapshot)")
