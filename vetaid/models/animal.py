# vetaid/models/animal.py
from enum import Enum
import logging

class AnimalSpecies(Enum):
    SHEEP = "sheep"
    GOAT = "goat"
    CAMEL = "camel"
    HORSE = "horse"
    CAT = "cat"
    DOG = "dog"
    COW = "cow"
    BUFFALO = "buffalo"
    CUSTOM = "custom"

class Sex(Enum):
    MALE = "male"
    FEMALE = "female"

# 'custom'은 가져오기 데이터 호환용
ALL_SPECIES = [s.value for s in AnimalSpecies]


def parse_species(value, record_id=None) -> AnimalSpecies:
    """저장된 문자열 값을 AnimalSpecies Enum 멤버로 변환합니다. 알 수 없는 값은 CUSTOM."""
    if isinstance(value, AnimalSpecies):
        return value
    try:
        return AnimalSpecies(value)
    except ValueError:
        logging.warning(f"Invalid AnimalSpecies value '{value}' for record {record_id}. Defaulting to CUSTOM.")
        return AnimalSpecies.CUSTOM
