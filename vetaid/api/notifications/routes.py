# vetaid/api/notifications/routes.py
from flask import Blueprint, jsonify, current_app

from .schemas import ReminderResponseSchema, NotificationResponseSchema

notifications_bp = Blueprint('notifications_bp', __name__)

def _state(service):
    return {
        "permission": service.permission.value,
        "supported": service.supports_notifications(),
        "reminders": ReminderResponseSchema(many=True).dump(service.list_reminders()),
        "delivered": NotificationResponseSchema(many=True).dump(service.list_delivered()),
    }

@notifications_bp.route('/', methods=['GET'])
def get_notification_state():
    """알림 권한 상태, 예약된 알림, 전달된 알림 목록."""
    return jsonify(_state(current_app.services['notifications'])), 200

@notifications_bp.route('/permission', methods=['POST'])
def request_permission():
    """알림 권한을 다시 요청합니다. 이미 거부된 경우 상태는 바뀌지 않습니다."""
    service = current_app.services['notifications']
    service.request_permission()
    return jsonify(_state(service)), 200
