# vetaid/api/settings/services.py
import logging

from vetaid.services.record_store import RecordStore
from vetaid.utils.datetime_utils import DateTimeUtils

class SettingsService:
    """테마 설정과 전체 데이터 백업(내보내기/가져오기)을 담당합니다."""
    def __init__(self, record_store: RecordStore):
        self.record_store = record_store

    def get_theme(self) -> str:
        return self.record_store.get_theme()

    def set_theme(self, theme: str) -> str:
        self.record_store.set_theme(theme)
        return theme

    def export_filename(self) -> str:
        return f"infectious_butterfly_backup_{DateTimeUtils.get_today_string()}.json"

    def export_snapshot(self) -> str:
        snapshot = self.record_store.export_all()
        logging.info("Data snapshot exported")
        return snapshot

    def import_snapshot(self, snapshot: str) -> bool:
        return self.record_store.import_all(snapshot)
