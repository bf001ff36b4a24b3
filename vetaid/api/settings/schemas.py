# vetaid/api/settings/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE

class ThemeSchema(Schema):
    """PUT /api/settings/theme 요청/응답 스키마."""
    class Meta:
        unknown = EXCLUDE

    theme = fields.Str(required=True, validate=validate.OneOf(['light', 'dark'], error="테마는 light 또는 dark 만 가능합니다."))
