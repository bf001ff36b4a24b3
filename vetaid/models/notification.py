# vetaid/models/notification.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

class NotificationPermission(Enum):
    """로컬 알림 권한 상태"""
    DEFAULT = "default"
    GRANTED = "granted"
    DENIED = "denied"

@dataclass
class Reminder:
    """
    접종 3일 전 알림 예약 정보.
    메모리에만 존재하며 프로세스가 재시작되면 사라집니다.
    """
    reminder_id: str
    animal_id: str
    vaccine_type: str
    dose_number: int
    dose_date: str        # ISO 타임스탬프
    fire_at: datetime
    fired: bool = False

@dataclass
class Notification:
    """실제로 전달된 로컬 알림."""
    title: str
    body: str
    reminder_id: Optional[str] = None
    delivered_at: datetime = field(default_factory=datetime.now)
