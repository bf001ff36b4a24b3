# vetaid/services/record_store.py
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

# 컬렉션 이름 -> 저장소 키
STORAGE_KEYS = {
    'vaccinations': 'infectious_butterfly_vaccinations',
    'tests': 'infectious_butterfly_tests',
    'drugs': 'infectious_butterfly_drugs',
    'prescriptions': 'infectious_butterfly_prescriptions',
    'vaccine_types': 'vaccine_types',
}
THEME_KEY = 'infectious_butterfly_theme'

# 내보내기/가져오기 스냅샷에 포함되는 컬렉션 (순서 유지)
SNAPSHOT_COLLECTIONS = ('vaccinations', 'tests', 'drugs', 'prescriptions')


class KeyValueStore(ABC):
    """
    문자열 키 아래에 JSON 문자열 전체를 저장하는 로컬 저장소 포트.
    부분 업데이트나 트랜잭션은 보장하지 않습니다.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        ...


class InMemoryKeyValueStore(KeyValueStore):
    """테스트 및 'memory' 백엔드용 딕셔너리 기반 저장소."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore(KeyValueStore):
    """
    하나의 JSON 파일(키 -> 문자열 blob)을 사용하는 온디바이스 저장소.
    쓰기마다 임시 파일에 기록한 뒤 rename 하여 파일이 반쯤 쓰인 상태로 남지 않게 합니다.
    """

    def __init__(self, path: str):
        self.path = os.path.abspath(path)
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        logging.info(f"JsonFileKeyValueStore initialized at {self.path}")

    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logging.error(f"저장소 파일을 읽을 수 없습니다 ({self.path}): {e}", exc_info=True)
            raise
        if not isinstance(data, dict):
            raise ValueError(f"저장소 파일 형식이 올바르지 않습니다: {self.path}")
        return data

    def _write(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(self.path) or '.'
        fd, tmp_path = tempfile.mkstemp(prefix='.vetaid-', suffix='.json', dir=directory)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


class RecordStore:
    """
    고정된 키 아래의 레코드 컬렉션을 불러오기/저장/삭제하는 범용 저장소 서비스.
    모든 레코드는 문자열 'id' 로 식별됩니다.
    """

    def __init__(self, kv_store: KeyValueStore):
        self.kv_store = kv_store

    def _key(self, collection: str) -> str:
        try:
            return STORAGE_KEYS[collection]
        except KeyError:
            raise ValueError(f"'{collection}'은(는) 알 수 없는 컬렉션입니다.")

    def get_all(self, collection: str) -> List[Dict[str, Any]]:
        """컬렉션의 모든 레코드를 삽입 순서대로 반환합니다. 저장된 것이 없으면 빈 목록."""
        raw = self.kv_store.get_item(self._key(collection))
        if not raw:
            return []
        try:
            records = json.loads(raw)
        except json.JSONDecodeError as e:
            logging.error(f"Stored collection '{collection}' is not valid JSON, reading as empty: {e}")
            return []
        if not isinstance(records, list):
            logging.error(f"Stored collection '{collection}' is not a JSON array, reading as empty")
            return []
        # 객체가 아닌 항목은 읽을 수 없으므로 건너뜀
        return [r for r in records if isinstance(r, dict)]

    def get(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        for record in self.get_all(collection):
            if record.get('id') == record_id:
                return record
        return None

    def _put_all(self, collection: str, records: List[Dict[str, Any]]) -> None:
        self.kv_store.set_item(self._key(collection), json.dumps(records, ensure_ascii=False))

    def save(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """id 기준 upsert: 같은 id 가 있으면 그 자리에서 교체, 없으면 끝에 추가합니다."""
        records = self.get_all(collection)
        for index, existing in enumerate(records):
            if existing.get('id') == record['id']:
                records[index] = record
                break
        else:
            records.append(record)

        self._put_all(collection, records)
        logging.info(f"Record saved to '{collection}' (id: {record['id']})")
        return record

    def delete(self, collection: str, record_id: str) -> None:
        """레코드를 삭제합니다. 없으면 아무 일도 하지 않습니다."""
        records = self.get_all(collection)
        remaining = [r for r in records if r.get('id') != record_id]
        if len(remaining) != len(records):
            self._put_all(collection, remaining)
            logging.info(f"Record deleted from '{collection}' (id: {record_id})")

    def export_all(self) -> str:
        """네 개 컬렉션 전체를 하나의 JSON 스냅샷 문자열로 직렬화합니다."""
        snapshot = {name: self.get_all(name) for name in SNAPSHOT_COLLECTIONS}
        return json.dumps(snapshot, ensure_ascii=False)

    def import_all(self, snapshot: str) -> bool:
        """
        스냅샷으로 컬렉션을 통째로 교체합니다.

        - 스냅샷에 있는 컬렉션만 교체하고, 없는 컬렉션은 건드리지 않습니다.
        - 알 수 없는 키는 무시합니다.
        - 스냅샷 전체를 먼저 파싱/검사한 뒤에만 기록하므로, 실패 시 아무것도 바뀌지 않습니다.
        """
        try:
            data = json.loads(snapshot)
        except (TypeError, ValueError) as e:
            logging.error(f"Failed to import data: {e}")
            return False

        if not isinstance(data, dict):
            logging.error("Failed to import data: snapshot is not a JSON object")
            return False

        staged = {}
        for name in SNAPSHOT_COLLECTIONS:
            value = data.get(name)
            if value is None:
                continue
            if not isinstance(value, list):
                logging.error(f"Failed to import data: '{name}' is not an array")
                return False
            if not all(isinstance(r, dict) and isinstance(r.get('id'), str) for r in value):
                logging.error(f"Failed to import data: every record in '{name}' must be an object with a string id")
                return False
            staged[name] = value

        for name, records in staged.items():
            self._put_all(name, records)

        logging.info(f"Imported collections: {list(staged.keys())}")
        return True

    def get_theme(self) -> str:
        return 'dark' if self.kv_store.get_item(THEME_KEY) == 'dark' else 'light'

    def set_theme(self, theme: str) -> None:
        if theme not in ('light', 'dark'):
            raise ValueError(f"'{theme}'은(는) 유효한 테마가 아닙니다.")
        self.kv_store.set_item(THEME_KEY, theme)
