# vetaid/api/vaccine_types/services.py
import logging
import uuid
from typing import Dict, Any, List

from vetaid.models.animal import parse_species
from vetaid.models.vaccine_type import VaccineType
from vetaid.services.record_store import RecordStore

COLLECTION = 'vaccine_types'

class VaccineTypeService:
    """백신 종류 카탈로그. 접종 폼의 기본 회차/간격 값으로 쓰입니다."""
    def __init__(self, record_store: RecordStore):
        self.record_store = record_store

    def list_vaccine_types(self) -> List[VaccineType]:
        return [VaccineType.from_dict(r) for r in self.record_store.get_all(COLLECTION)]

    def create_vaccine_type(self, form: Dict[str, Any]) -> VaccineType:
        vaccine_type = VaccineType(
            id=str(uuid.uuid4()),
            name=form['name'],
            totalDoses=form['totalDoses'],
            # 단회 접종은 간격이 의미 없으므로 0으로 저장
            daysInterval=form['daysInterval'] if form['totalDoses'] > 1 else 0,
            targetAnimals=[parse_species(s) for s in form['targetAnimals']]
        )
        self.record_store.save(COLLECTION, vaccine_type.to_dict())
        logging.info(f"Vaccine type '{vaccine_type.name}' added to catalog")
        return vaccine_type

    def delete_vaccine_type(self, vaccine_type_id: str) -> None:
        if self.record_store.get(COLLECTION, vaccine_type_id) is None:
            raise FileNotFoundError("해당 ID의 백신 종류를 찾을 수 없습니다.")
        self.record_store.delete(COLLECTION, vaccine_type_id)
