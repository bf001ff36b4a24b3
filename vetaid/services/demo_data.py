# vetaid/services/demo_data.py
"""
처음 실행 시 비어 있는 컬렉션에 예시 데이터를 채웁니다.
이미 레코드가 있는 컬렉션은 건드리지 않습니다.
"""

import logging
import uuid
from typing import List

from vetaid.models.animal import AnimalSpecies, Sex
from vetaid.models.drug import Drug, SpeciesDosage, AdministrationRoute
from vetaid.models.procedure import TestProcedure, AgeRange
from vetaid.models.vaccination import Vaccination
from vetaid.services.record_store import RecordStore
from vetaid.utils.calculators import generate_dose_schedule
from vetaid.utils.datetime_utils import DateTimeUtils


def _sample_vaccination() -> Vaccination:
    first_dose_time = DateTimeUtils.to_iso_string(DateTimeUtils.now())
    return Vaccination(
        id=str(uuid.uuid4()),
        animalId='COW-001',
        age=2,
        sex=Sex.FEMALE,
        isPregnant=False,
        ownerPhone='555-1234',
        vaccineTime=first_dose_time,
        vaccineType='FMD Vaccine',
        species=AnimalSpecies.COW,
        doses=generate_dose_schedule(first_dose_time, 2, 7, is_new_record=True),
        notes='First vaccination'
    )


def _sample_procedure() -> TestProcedure:
    return TestProcedure(
        id=str(uuid.uuid4()),
        name='Tuberculosis Test',
        steps=[
            'Clean the area with antiseptic',
            'Measure 2mm of tuberculin',
            'Inject intradermally',
            'Check for reaction after 72 hours',
        ],
        targetAnimals=[AnimalSpecies.COW, AnimalSpecies.BUFFALO],
        ageRange=AgeRange(min=1, max=10)
    )


def _sample_drug() -> Drug:
    return Drug(
        id=str(uuid.uuid4()),
        name='Amoxicillin',
        dosages=[
            SpeciesDosage(AnimalSpecies.COW, 7),
            SpeciesDosage(AnimalSpecies.DOG, 10),
            SpeciesDosage(AnimalSpecies.CAT, 8),
        ],
        routes=[AdministrationRoute.IM, AdministrationRoute.ORAL]
    )


def seed_demo_data(record_store: RecordStore) -> List[str]:
    """
    vaccinations/tests/drugs 중 비어 있는 컬렉션에만 예시 레코드를 하나씩 추가합니다.

    :return: 예시 데이터가 추가된 컬렉션 이름 목록
    """
    samples = {
        'vaccinations': _sample_vaccination,
        'tests': _sample_procedure,
        'drugs': _sample_drug,
    }
    seeded = []
    for collection, factory in samples.items():
        if record_store.get_all(collection):
            continue
        record_store.save(collection, factory().to_dict())
        seeded.append(collection)

    if seeded:
        logging.info(f"Demo data seeded: {seeded}")
    return seeded
