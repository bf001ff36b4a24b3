# vetaid/api/procedures/services.py
import logging
import uuid
from typing import Dict, Any, List, Optional

from vetaid.api.common import matches_term
from vetaid.models.animal import parse_species
from vetaid.models.procedure import TestProcedure, AgeRange
from vetaid.services.record_store import RecordStore

COLLECTION = 'tests'

class ProcedureService:
    """검사 절차(단계 목록, 대상 동물, 나이 범위) 관리 서비스."""
    def __init__(self, record_store: RecordStore):
        self.record_store = record_store

    def list_procedures(self, term: Optional[str] = None) -> List[TestProcedure]:
        """이름, 대상 동물, 단계 내용으로 검색합니다."""
        procedures = [TestProcedure.from_dict(r) for r in self.record_store.get_all(COLLECTION)]
        return [
            p for p in procedures
            if matches_term(term, [p.name, *[s.value for s in p.targetAnimals], *p.steps])
        ]

    def get_procedure(self, procedure_id: str) -> TestProcedure:
        record = self.record_store.get(COLLECTION, procedure_id)
        if record is None:
            raise FileNotFoundError("해당 ID의 검사 절차를 찾을 수 없습니다.")
        return TestProcedure.from_dict(record)

    def _build(self, procedure_id: str, form: Dict[str, Any]) -> TestProcedure:
        age_range = form['ageRange']
        return TestProcedure(
            id=procedure_id,
            name=form['name'],
            steps=list(form['steps']),
            targetAnimals=[parse_species(s) for s in form['targetAnimals']],
            ageRange=AgeRange(min=age_range['min'], max=age_range['max'])
        )

    def create_procedure(self, form: Dict[str, Any]) -> TestProcedure:
        procedure = self._build(str(uuid.uuid4()), form)
        self.record_store.save(COLLECTION, procedure.to_dict())
        logging.info(f"Test procedure '{procedure.name}' created with {len(procedure.steps)} steps")
        return procedure

    def update_procedure(self, procedure_id: str, form: Dict[str, Any]) -> TestProcedure:
        self.get_procedure(procedure_id)
        procedure = self._build(procedure_id, form)
        self.record_store.save(COLLECTION, procedure.to_dict())
        return procedure

    def delete_procedure(self, procedure_id: str) -> None:
        self.get_procedure(procedure_id)
        self.record_store.delete(COLLECTION, procedure_id)
        logging.info(f"Test procedure {procedure_id} deleted")
