# vetaid/api/vaccine_types/schemas.py
from marshmallow import Schema, fields, validate, validates_schema, ValidationError, pre_load, EXCLUDE

from vetaid.api.common import not_blank, strip_strings
from vetaid.models.animal import ALL_SPECIES

class VaccineTypeFormSchema(Schema):
    """POST /api/vaccine-types 요청 본문 스키마."""
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(required=True, validate=not_blank("백신 이름은 필수입니다."),
                      error_messages={"required": "백신 이름은 필수입니다."})
    totalDoses = fields.Int(load_default=1,
                            validate=validate.Range(min=1, error="최소 1회 이상의 접종이 필요합니다."))
    daysInterval = fields.Int(load_default=0,
                              validate=validate.Range(min=0, error="접종 간격은 음수일 수 없습니다."))
    targetAnimals = fields.List(fields.Str(validate=validate.OneOf(ALL_SPECIES)), required=True,
                                validate=validate.Length(min=1, error="대상 동물을 1종 이상 선택하세요."),
                                error_messages={"required": "대상 동물을 1종 이상 선택하세요."})

    @pre_load
    def preprocess_data(self, data, **kwargs):
        return strip_strings(data, 'name')

    @validates_schema(skip_on_field_errors=False)
    def validate_interval(self, data, **kwargs):
        total_doses = data.get('totalDoses')
        if total_doses is not None and total_doses > 1 and data.get('daysInterval', 0) <= 0:
            raise ValidationError("다회 접종에는 0보다 큰 접종 간격이 필요합니다.", field_name='daysInterval')
