# vetaid/utils/test_calculators.py
"""
용량 계산 / 접종 일정 생성 테스트

사용법: python -m pytest vetaid/utils/test_calculators.py -v
"""

import pytest
from dateutil import tz

from vetaid.models.animal import AnimalSpecies
from vetaid.models.drug import Drug, SpeciesDosage, AdministrationRoute
from vetaid.models.vaccination import Dose
from vetaid.utils import datetime_utils
from vetaid.utils.calculators import (
    calculate_dose, default_route, generate_dose_schedule, derive_schedule_parameters
)
from vetaid.utils.datetime_utils import DateTimeUtils


@pytest.fixture(autouse=True)
def utc_local(monkeypatch):
    monkeypatch.setattr(datetime_utils, 'LOCAL_TZ', tz.UTC)


@pytest.fixture
def amoxicillin():
    return Drug(
        id='1',
        name='Amoxicillin',
        dosages=[
            SpeciesDosage(AnimalSpecies.COW, 7),
            SpeciesDosage(AnimalSpecies.DOG, 10),
            SpeciesDosage(AnimalSpecies.CAT, 8),
        ],
        routes=[AdministrationRoute.IM, AdministrationRoute.ORAL]
    )


def test_calculate_dose_cow_scenario(amoxicillin):
    dose = calculate_dose(amoxicillin, AnimalSpecies.COW, 250)
    assert dose == 1750
    assert f"{dose:.2f}" == "1750.00"


def test_calculate_dose_matches_table_for_every_species(amoxicillin):
    for entry in amoxicillin.dosages:
        assert calculate_dose(amoxicillin, entry.species, 12.5) == entry.dosage * 12.5


def test_calculate_dose_without_species_entry(amoxicillin):
    with pytest.raises(LookupError):
        calculate_dose(amoxicillin, AnimalSpecies.HORSE, 400)


def test_calculate_dose_rejects_non_positive_weight(amoxicillin):
    with pytest.raises(ValueError):
        calculate_dose(amoxicillin, AnimalSpecies.COW, 0)


def test_default_route(amoxicillin):
    assert default_route(amoxicillin) is AdministrationRoute.ORAL

    injectable = Drug(id='2', name='Ivermectin', routes=[AdministrationRoute.SC, AdministrationRoute.IM])
    assert default_route(injectable) is AdministrationRoute.SC

    with pytest.raises(LookupError):
        default_route(Drug(id='3', name='Nothing'))


def test_two_dose_schedule_scenario():
    doses = generate_dose_schedule("2025-01-01T09:00:00.000Z", 2, 7, is_new_record=True)

    assert doses == [
        Dose(number=1, date="2025-01-01T09:00:00.000Z", administered=True),
        Dose(number=2, date="2025-01-08T09:00:00.000Z", administered=False),
    ]


@pytest.mark.parametrize("total, interval", [(1, 0), (3, 1), (5, 21), (12, 30)])
def test_schedule_dates_follow_interval(total, interval):
    first = "2025-03-15T10:30:00.000Z"
    doses = generate_dose_schedule(first, total, interval, is_new_record=True)

    assert [d.number for d in doses] == list(range(1, total + 1))
    assert doses[0].date == first
    for i, dose in enumerate(doses[1:], start=1):
        assert dose.date == DateTimeUtils.add_days(first, i * interval)
    assert [d.administered for d in doses] == [True] + [False] * (total - 1)


def test_edit_preserves_administered_flags():
    existing = [
        Dose(1, "2025-01-01T09:00:00.000Z", True),
        Dose(2, "2025-01-08T09:00:00.000Z", True),
        Dose(3, "2025-01-15T09:00:00.000Z", False),
    ]

    doses = generate_dose_schedule("2025-02-01T09:00:00.000Z", 4, 10,
                                   is_new_record=False, existing_doses=existing)

    assert [d.administered for d in doses] == [True, True, False, False]
    assert [d.date for d in doses] == [
        "2025-02-01T09:00:00.000Z",
        "2025-02-11T09:00:00.000Z",
        "2025-02-21T09:00:00.000Z",
        "2025-03-03T09:00:00.000Z",
    ]


def test_edit_without_prior_first_dose_starts_pending():
    doses = generate_dose_schedule("2025-01-01T09:00:00.000Z", 2, 7, is_new_record=False, existing_doses=[])
    assert [d.administered for d in doses] == [False, False]


def test_edit_shrinking_schedule_keeps_leading_flags():
    existing = [Dose(1, "2025-01-01T09:00:00.000Z", False), Dose(2, "2025-01-08T09:00:00.000Z", True)]
    doses = generate_dose_schedule("2025-01-01T09:00:00.000Z", 1, 0, is_new_record=False, existing_doses=existing)
    assert doses == [Dose(1, "2025-01-01T09:00:00.000Z", False)]


@pytest.mark.parametrize("total, interval", [(0, 7), (-1, 7), (2, 0), (3, -5)])
def test_schedule_validation(total, interval):
    with pytest.raises(ValueError):
        generate_dose_schedule("2025-01-01T09:00:00.000Z", total, interval, is_new_record=True)


def test_derive_schedule_parameters():
    doses = generate_dose_schedule("2025-01-01T09:00:00.000Z", 3, 14, is_new_record=True)
    assert derive_schedule_parameters(doses) == (3, 14)
    assert derive_schedule_parameters(doses[:1]) == (1, 0)
