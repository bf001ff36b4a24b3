# vetaid/api/vaccinations/services.py
import logging
import uuid
from datetime import date, datetime
from typing import Dict, Any, List, Optional

from vetaid.api.common import format_number, matches_term
from vetaid.models.animal import Sex, parse_species
from vetaid.models.vaccination import Vaccination
from vetaid.services.notification_service import NotificationService
from vetaid.services.record_store import RecordStore
from vetaid.utils.calculators import generate_dose_schedule, derive_schedule_parameters
from vetaid.utils.datetime_utils import DateTimeUtils

COLLECTION = 'vaccinations'

class VaccinationService:
    """접종 기록의 등록/수정/검색/삭제와 달력 조회를 전담하는 서비스 클래스."""
    def __init__(self, record_store: RecordStore, notification_service: Optional[NotificationService] = None):
        self.record_store = record_store
        self.notification_service = notification_service
        logging.info("VaccinationService initialized.")

    def list_vaccinations(self, term: Optional[str] = None) -> List[Vaccination]:
        """동물 ID, 백신 종류, 종, 나이로 부분 일치 검색합니다. 검색어가 없으면 전체 목록."""
        vaccinations = [Vaccination.from_dict(r) for r in self.record_store.get_all(COLLECTION)]
        return [
            v for v in vaccinations
            if matches_term(term, [v.animalId, v.vaccineType, v.species.value, format_number(v.age)])
        ]

    def get_vaccination(self, vaccination_id: str) -> Vaccination:
        record = self.record_store.get(COLLECTION, vaccination_id)
        if record is None:
            raise FileNotFoundError("해당 ID의 접종 기록을 찾을 수 없습니다.")
        return Vaccination.from_dict(record)

    def to_detail_dict(self, vaccination: Vaccination) -> Dict[str, Any]:
        """상세 응답: 저장 형식 + 수정 폼 초기값(totalDoses, daysInterval)."""
        data = vaccination.to_dict()
        data['totalDoses'], data['daysInterval'] = derive_schedule_parameters(vaccination.doses)
        return data

    def _build_vaccination(self, record_id: str, form: Dict[str, Any],
                           existing: Optional[Vaccination]) -> Vaccination:
        first_dose_time = DateTimeUtils.combine_date_and_time(form['vaccineDate'], form['vaccineTime'])
        doses = generate_dose_schedule(
            first_dose_time,
            form['totalDoses'],
            form['daysInterval'],
            is_new_record=existing is None,
            existing_doses=existing.doses if existing else None
        )

        sex = Sex(form['sex'])
        age = form['age']
        notes = (form.get('notes') or '').strip() or None

        return Vaccination(
            id=record_id,
            animalId=form['animalId'],
            age=age,
            sex=sex,
            # 임신 여부는 암컷이고 1.5세 초과일 때만 기록
            isPregnant=bool(form.get('isPregnant')) if Vaccination.pregnancy_applies(sex, age) else None,
            ownerPhone=form['ownerPhone'],
            vaccineTime=first_dose_time,
            vaccineType=form['vaccineType'],
            species=parse_species(form['species']),
            doses=doses,
            notes=notes
        )

    def _arm_reminders(self, vaccination: Vaccination) -> None:
        """저장 후 미투여 회차마다 알림 예약. 실패해도 저장에는 영향이 없습니다."""
        if not self.notification_service:
            return
        try:
            self.notification_service.schedule_pending_doses(vaccination)
        except Exception as e:
            logging.warning(f"Failed to schedule reminders for vaccination {vaccination.id}: {e}")

    def create_vaccination(self, form: Dict[str, Any]) -> Vaccination:
        """신규 접종 기록 생성. 1차 접종은 투여 완료로 기록됩니다."""
        vaccination = self._build_vaccination(str(uuid.uuid4()), form, existing=None)
        self.record_store.save(COLLECTION, vaccination.to_dict())
        logging.info(f"Vaccination created for animal {vaccination.animalId} ({len(vaccination.doses)} doses)")
        self._arm_reminders(vaccination)
        return vaccination

    def update_vaccination(self, vaccination_id: str, form: Dict[str, Any]) -> Vaccination:
        """
        접종 기록 전체 교체. 날짜만 다시 계산하고 기존 회차의 투여 여부는 유지합니다.
        """
        existing = self.get_vaccination(vaccination_id)
        vaccination = self._build_vaccination(vaccination_id, form, existing=existing)
        self.record_store.save(COLLECTION, vaccination.to_dict())
        logging.info(f"Vaccination {vaccination_id} updated")
        self._arm_reminders(vaccination)
        return vaccination

    def delete_vaccination(self, vaccination_id: str) -> None:
        if self.record_store.get(COLLECTION, vaccination_id) is None:
            raise FileNotFoundError("해당 ID의 접종 기록을 찾을 수 없습니다.")
        # 이미 예약된 알림 타이머는 취소되지 않습니다.
        self.record_store.delete(COLLECTION, vaccination_id)

    def _dose_dates(self) -> Dict[date, List[Dict[str, Any]]]:
        """현지 날짜 -> 그날 예정된 (접종 기록, 회차) 목록"""
        by_date: Dict[date, List[Dict[str, Any]]] = {}
        for vaccination in self.list_vaccinations():
            for dose in vaccination.doses:
                try:
                    day = DateTimeUtils.local_date(dose.date)
                except ValueError:
                    logging.warning(f"Skipping dose with invalid date in vaccination {vaccination.id}")
                    continue
                by_date.setdefault(day, []).append({'vaccination': vaccination, 'dose': dose})
        return by_date

    def get_calendar(self, year: int, month: int, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """월간 달력 그리드. 각 칸에 이번 달 여부, 오늘 여부, 접종 일정 유무를 표시합니다."""
        now = now or DateTimeUtils.now()
        today = DateTimeUtils.local_date(now)
        dose_dates = self._dose_dates()
        return [
            {
                'date': day,
                'isCurrentMonth': day.month == month and day.year == year,
                'isToday': DateTimeUtils.is_same_day(day, today),
                'hasVaccinations': day in dose_dates,
            }
            for day in DateTimeUtils.get_calendar_dates(year, month)
        ]

    def get_vaccinations_on_date(self, day: date) -> List[Dict[str, Any]]:
        """선택한 날짜에 접종 회차가 있는 기록과 해당 회차 번호 목록."""
        grouped: Dict[str, Dict[str, Any]] = {}
        for entry in self._dose_dates().get(day, []):
            vaccination = entry['vaccination']
            item = grouped.setdefault(vaccination.id, {'vaccination': vaccination.to_dict(), 'doseNumbers': []})
            item['doseNumbers'].append(entry['dose'].number)
        return list(grouped.values())

    def get_upcoming_doses(self, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """앞으로 3일 이내에 예정된 미투여 회차 목록 (날짜순)."""
        now = now or DateTimeUtils.now()
        upcoming = []
        for vaccination in self.list_vaccinations():
            for dose in vaccination.doses:
                if dose.administered:
                    continue
                try:
                    due = DateTimeUtils.is_in_next_three_days(dose.date, now=now)
                except ValueError:
                    continue
                if due:
                    upcoming.append({
                        'vaccinationId': vaccination.id,
                        'animalId': vaccination.animalId,
                        'vaccineType': vaccination.vaccineType,
                        'species': vaccination.species.value,
                        'doseNumber': dose.number,
                        'date': dose.date,
                    })
        return sorted(upcoming, key=lambda item: DateTimeUtils.parse_iso_datetime(item['date']))
