# vetaid/services/notification_service.py
import logging
import threading
import uuid
from typing import Callable, List, Optional

from vetaid.models.notification import Notification, NotificationPermission, Reminder
from vetaid.models.vaccination import Vaccination
from vetaid.utils.datetime_utils import DateTimeUtils


def log_delivery(notification: Notification) -> None:
    """기본 전달 방식: 로그로 남깁니다."""
    logging.info(f"[Notification] {notification.title} - {notification.body}")


class NotificationService:
    """
    접종 알림(로컬 알림) 관련 로직을 담당하는 공용 서비스 클래스.

    - 아직 투여되지 않은 접종마다 접종일 3일 전에 한 번 울리는 타이머를 예약합니다.
    - 권한이 없으면 조용히 건너뛰며, 저장 작업을 막거나 실패시키지 않습니다.
    - 타이머는 저장되지 않으므로 프로세스가 재시작되면 사라지고, 예약 후에는 취소할 수 없습니다.
    """

    def __init__(self,
                 permission: str = NotificationPermission.DEFAULT.value,
                 prompt: Optional[Callable[[], bool]] = None,
                 lead_days: int = 3,
                 clock: Callable = DateTimeUtils.now,
                 timer_factory: Callable = threading.Timer,
                 deliver: Callable[[Notification], None] = log_delivery):
        self.permission = NotificationPermission(permission)
        self.prompt = prompt
        self.lead_days = lead_days
        self.clock = clock
        self.timer_factory = timer_factory
        self.deliver = deliver
        self.reminders: List[Reminder] = []
        self.delivered: List[Notification] = []
        self._lock = threading.Lock()

    def supports_notifications(self) -> bool:
        return self.prompt is not None or self.permission is not NotificationPermission.DEFAULT

    def request_permission(self) -> bool:
        """알림 권한을 확인하고, 아직 묻지 않았다면 한 번 요청합니다."""
        if self.permission is NotificationPermission.GRANTED:
            return True
        if self.permission is NotificationPermission.DENIED or self.prompt is None:
            return False

        try:
            granted = bool(self.prompt())
        except Exception as e:
            logging.warning(f"Notification permission prompt failed: {e}")
            return False

        self.permission = NotificationPermission.GRANTED if granted else NotificationPermission.DENIED
        logging.info(f"Notification permission: {self.permission.value}")
        return granted

    def send_notification(self, title: str, body: str, reminder_id: Optional[str] = None) -> bool:
        """권한이 있을 때만 알림을 전달합니다."""
        if self.permission is not NotificationPermission.GRANTED:
            return False

        notification = Notification(title=title, body=body, reminder_id=reminder_id)
        try:
            self.deliver(notification)
        except Exception as e:
            logging.error(f"알림 전달 중 오류 발생: {e}", exc_info=True)
            return False

        with self._lock:
            self.delivered.append(notification)
        return True

    def _fire(self, reminder: Reminder) -> None:
        with self._lock:
            reminder.fired = True
        self.send_notification(
            f"Vaccination Reminder: {reminder.animal_id}",
            f"Upcoming {reminder.vaccine_type} vaccination (Dose {reminder.dose_number}) in {self.lead_days} days",
            reminder_id=reminder.reminder_id
        )

    def schedule_vaccination_reminder(self, animal_id: str, vaccine_type: str,
                                      dose_number: int, dose_date: str) -> Optional[Reminder]:
        """
        접종일 lead_days 일 전에 울릴 알림을 예약합니다.

        :return: 예약된 Reminder. 권한이 없거나 알림 시각이 이미 지났으면 None
        """
        if not self.request_permission():
            logging.info(f"Notification permission denied, reminder skipped ({animal_id}, dose {dose_number})")
            return None

        fire_at = DateTimeUtils.parse_iso_datetime(DateTimeUtils.add_days(dose_date, -self.lead_days))
        delay = (fire_at - self.clock()).total_seconds()
        if delay <= 0:
            return None

        reminder = Reminder(
            reminder_id=str(uuid.uuid4()),
            animal_id=animal_id,
            vaccine_type=vaccine_type,
            dose_number=dose_number,
            dose_date=dose_date,
            fire_at=fire_at
        )
        timer = self.timer_factory(delay, self._fire, args=(reminder,))
        timer.daemon = True
        timer.start()

        with self._lock:
            self.reminders.append(reminder)
        logging.info(f"Reminder armed for {animal_id} dose {dose_number} at {DateTimeUtils.to_iso_string(fire_at)}")
        return reminder

    def schedule_pending_doses(self, vaccination: Vaccination) -> List[Reminder]:
        """투여되지 않은 모든 접종 회차에 대해 알림을 예약합니다."""
        armed = []
        for dose in vaccination.doses:
            if dose.administered:
                continue
            reminder = self.schedule_vaccination_reminder(
                vaccination.animalId, vaccination.vaccineType, dose.number, dose.date
            )
            if reminder:
                armed.append(reminder)
        return armed

    def list_reminders(self) -> List[Reminder]:
        """아직 울리지 않은 예약 알림만 반환합니다."""
        with self._lock:
            return [r for r in self.reminders if not r.fired]

    def list_delivered(self) -> List[Notification]:
        with self._lock:
            return list(self.delivered)
