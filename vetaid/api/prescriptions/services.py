# vetaid/api/prescriptions/services.py
import logging
import uuid
from typing import Dict, Any, List, Optional

from vetaid.api.common import matches_term
from vetaid.api.drugs.services import DrugService
from vetaid.models.animal import AnimalSpecies, parse_species
from vetaid.models.drug import AdministrationRoute, ROUTE_LABELS
from vetaid.models.prescription import Prescription, PrescribedDrug
from vetaid.services.record_store import RecordStore
from vetaid.utils.calculators import calculate_dose, default_route, find_species_dosage
from vetaid.utils.datetime_utils import DateTimeUtils

COLLECTION = 'prescriptions'

class PrescriptionService:
    """
    체중 기반 처방 작성/저장 서비스.
    저장 시점의 calculatedDose 가 고정되며, 이후 약물 용량이 바뀌거나 약물이 삭제되어도 다시 계산하지 않습니다.
    """
    def __init__(self, record_store: RecordStore, drug_service: DrugService):
        self.record_store = record_store
        self.drug_service = drug_service

    def build_lines(self, species: AnimalSpecies, weight: float,
                    requested: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        요청된 약물마다 투여 경로와 총 투여량(mg)을 계산합니다.

        Raises:
            FileNotFoundError: 존재하지 않는 약물
            LookupError: 해당 종의 용량 정보가 없거나, 제공되지 않는 투여 경로
        """
        lines = []
        for item in requested:
            drug = self.drug_service.find_drug(item['drugId'])
            if drug is None:
                raise FileNotFoundError(f"약물을 찾을 수 없습니다: {item['drugId']}")

            dose = calculate_dose(drug, species, weight)
            if item.get('route'):
                route = AdministrationRoute(item['route'])
                if route not in drug.routes:
                    raise LookupError(f"{drug.name}은(는) '{route.value}' 경로를 제공하지 않습니다.")
            else:
                route = default_route(drug)

            lines.append({
                'drugId': drug.id,
                'name': drug.name,
                'dosage': find_species_dosage(drug, species),
                'route': route.value,
                'calculatedDose': dose,
            })
        return lines

    def calculate(self, form: Dict[str, Any]) -> Dict[str, Any]:
        species = parse_species(form['species'])
        return {
            'species': species.value,
            'weight': form['weight'],
            'drugs': self.build_lines(species, form['weight'], form['drugs']),
        }

    def list_prescriptions(self, term: Optional[str] = None) -> List[Prescription]:
        """동물 ID, 종으로 검색합니다."""
        prescriptions = [Prescription.from_dict(r) for r in self.record_store.get_all(COLLECTION)]
        return [p for p in prescriptions if matches_term(term, [p.animalId, p.species.value])]

    def get_prescription(self, prescription_id: str) -> Prescription:
        record = self.record_store.get(COLLECTION, prescription_id)
        if record is None:
            raise FileNotFoundError("해당 ID의 처방을 찾을 수 없습니다.")
        return Prescription.from_dict(record)

    def _build(self, prescription_id: str, form: Dict[str, Any], date: str) -> Prescription:
        species = parse_species(form['species'])
        lines = self.build_lines(species, form['weight'], form['drugs'])
        return Prescription(
            id=prescription_id,
            animalId=form['animalId'],
            species=species,
            weight=form['weight'],
            date=date,
            drugs=[
                PrescribedDrug(drugId=l['drugId'], route=AdministrationRoute(l['route']), calculatedDose=l['calculatedDose'])
                for l in lines
            ]
        )

    def create_prescription(self, form: Dict[str, Any]) -> Prescription:
        prescription = self._build(str(uuid.uuid4()), form, DateTimeUtils.to_iso_string(DateTimeUtils.now()))
        self.record_store.save(COLLECTION, prescription.to_dict())
        logging.info(f"Prescription saved for animal {prescription.animalId} ({len(prescription.drugs)} drugs)")
        return prescription

    def update_prescription(self, prescription_id: str, form: Dict[str, Any]) -> Prescription:
        """수정 시 용량은 현재 약물 정보로 다시 계산하고 처방 일시는 유지합니다."""
        existing = self.get_prescription(prescription_id)
        prescription = self._build(prescription_id, form, existing.date)
        self.record_store.save(COLLECTION, prescription.to_dict())
        return prescription

    def delete_prescription(self, prescription_id: str) -> None:
        self.get_prescription(prescription_id)
        self.record_store.delete(COLLECTION, prescription_id)

    def build_print_context(self, prescription_id: str) -> Dict[str, Any]:
        """
        인쇄용 처방전 데이터. 삭제된 약물은 'Unknown drug' 로 표시합니다.
        mg/kg 는 저장된 calculatedDose / weight 로 구하므로 이후 약물 용량이 바뀌어도 처방 당시 값이 인쇄됩니다.
        """
        prescription = self.get_prescription(prescription_id)
        weight = prescription.weight
        has_weight = isinstance(weight, (int, float)) and not isinstance(weight, bool) and weight > 0
        rows = []
        for line in prescription.drugs:
            drug = self.drug_service.find_drug(line.drugId)
            rate = round(line.calculatedDose / weight, 4) if has_weight else None
            rows.append({
                'name': drug.name if drug else 'Unknown drug',
                'dosage': f"{rate:g} mg/kg" if rate is not None else '-',
                'route': ROUTE_LABELS.get(line.route, line.route.value),
                'total': f"{line.calculatedDose:.2f} mg",
            })
        try:
            printed_date = DateTimeUtils.format_calendar_date(prescription.date)
        except ValueError:
            printed_date = prescription.date
        return {
            'prescription': prescription,
            'species': prescription.species.value,
            'date': printed_date,
            'rows': rows,
        }
