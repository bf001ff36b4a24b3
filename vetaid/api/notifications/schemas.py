# vetaid/api/notifications/schemas.py
from marshmallow import Schema, fields

class ReminderResponseSchema(Schema):
    reminderId = fields.Str(attribute='reminder_id')
    animalId = fields.Str(attribute='animal_id')
    vaccineType = fields.Str(attribute='vaccine_type')
    doseNumber = fields.Int(attribute='dose_number')
    doseDate = fields.Str(attribute='dose_date')
    fireAt = fields.DateTime(attribute='fire_at')
    fired = fields.Bool()

class NotificationResponseSchema(Schema):
    title = fields.Str()
    body = fields.Str()
    reminderId = fields.Str(attribute='reminder_id', allow_none=True)
    deliveredAt = fields.DateTime(attribute='delivered_at')
