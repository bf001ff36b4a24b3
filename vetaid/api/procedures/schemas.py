# vetaid/api/procedures/schemas.py
from marshmallow import Schema, fields, validate, validates_schema, ValidationError, pre_load, EXCLUDE

from vetaid.api.common import not_blank, strip_strings
from vetaid.models.animal import ALL_SPECIES

class AgeRangeSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    min = fields.Float(required=True,
                       validate=validate.Range(min=0, error="최소 나이는 0 이상이어야 합니다."))
    max = fields.Float(required=True,
                       validate=validate.Range(min=0, min_inclusive=False, error="최대 나이는 0보다 커야 합니다."))

class TestProcedureFormSchema(Schema):
    """
    POST /api/tests, PUT /api/tests/<id> 요청 본문 스키마.
    steps 는 문자열 배열 또는 줄바꿈으로 구분된 텍스트 모두 허용합니다.
    """
    __test__ = False

    class Meta:
        unknown = EXCLUDE

    name = fields.Str(required=True, validate=not_blank("검사 이름은 필수입니다."),
                      error_messages={"required": "검사 이름은 필수입니다."})
    steps = fields.List(fields.Str(), required=True,
                        validate=validate.Length(min=1, error="최소 1개 이상의 단계가 필요합니다."),
                        error_messages={"required": "최소 1개 이상의 단계가 필요합니다."})
    targetAnimals = fields.List(fields.Str(validate=validate.OneOf(ALL_SPECIES)), required=True,
                                validate=validate.Length(min=1, error="대상 동물을 1종 이상 선택하세요."),
                                error_messages={"required": "대상 동물을 1종 이상 선택하세요."})
    ageRange = fields.Nested(AgeRangeSchema, load_default=lambda: {'min': 0, 'max': 20})

    @pre_load
    def normalize_steps(self, data, **kwargs):
        """줄 단위 텍스트를 단계 목록으로 바꾸고, 앞뒤 공백 제거 후 빈 줄은 버립니다."""
        data = strip_strings(data, 'name')
        if not isinstance(data, dict):
            return data
        steps = data.get('steps')
        if isinstance(steps, str):
            steps = steps.splitlines()
        if isinstance(steps, list):
            data['steps'] = [s.strip() for s in steps if isinstance(s, str) and s.strip()]
        return data

    @validates_schema(skip_on_field_errors=False)
    def validate_age_range(self, data, **kwargs):
        age_range = data.get('ageRange') or {}
        if 'min' in age_range and 'max' in age_range and age_range['min'] >= age_range['max']:
            raise ValidationError("최소 나이는 최대 나이보다 작아야 합니다.", field_name='ageRange')
