# vetaid/api/prescriptions/schemas.py
from marshmallow import Schema, fields, validate, validates_schema, ValidationError, pre_load, EXCLUDE

from vetaid.api.common import not_blank, strip_strings
from vetaid.models.animal import ALL_SPECIES
from vetaid.models.drug import AdministrationRoute

class PrescriptionLineSchema(Schema):
    """처방에 추가할 약물 한 줄. route 를 생략하면 약물의 기본 경로를 사용합니다."""
    class Meta:
        unknown = EXCLUDE

    drugId = fields.Str(required=True, validate=not_blank("약물을 선택하세요."))
    route = fields.Str(load_default=None, allow_none=True,
                       validate=validate.OneOf([r.value for r in AdministrationRoute]))

class PrescriptionCalculateSchema(Schema):
    """POST /api/prescriptions/calculate 요청 본문 (처방 작성 중 용량 미리보기)."""
    class Meta:
        unknown = EXCLUDE

    species = fields.Str(load_default='cow', validate=validate.OneOf(ALL_SPECIES))
    weight = fields.Float(required=True,
                          validate=validate.Range(min=0, min_inclusive=False, error="유효한 체중을 입력하세요."),
                          error_messages={"required": "유효한 체중을 입력하세요.", "invalid": "유효한 체중을 입력하세요."})
    drugs = fields.List(fields.Nested(PrescriptionLineSchema), load_default=list)

    @validates_schema(skip_on_field_errors=False)
    def validate_unique_drugs(self, data, **kwargs):
        """같은 약물은 처방에 한 번만 추가할 수 있습니다."""
        drug_ids = [line['drugId'] for line in data.get('drugs') or [] if 'drugId' in line]
        if len(drug_ids) != len(set(drug_ids)):
            raise ValidationError("이미 처방에 추가된 약물입니다.", field_name='drugs')

class PrescriptionFormSchema(PrescriptionCalculateSchema):
    """POST /api/prescriptions, PUT /api/prescriptions/<id> 요청 본문 스키마."""
    animalId = fields.Str(required=True, validate=not_blank("동물 ID는 필수입니다."),
                          error_messages={"required": "동물 ID는 필수입니다."})
    drugs = fields.List(fields.Nested(PrescriptionLineSchema), required=True,
                        validate=validate.Length(min=1, error="최소 1개 이상의 약물을 선택하세요."),
                        error_messages={"required": "최소 1개 이상의 약물을 선택하세요."})

    @pre_load
    def preprocess_data(self, data, **kwargs):
        return strip_strings(data, 'animalId')
