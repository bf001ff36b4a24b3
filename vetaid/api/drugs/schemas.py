# vetaid/api/drugs/schemas.py
from marshmallow import Schema, fields, validate, validates_schema, ValidationError, pre_load, EXCLUDE

from vetaid.api.common import not_blank, strip_strings
from vetaid.models.animal import ALL_SPECIES
from vetaid.models.drug import AdministrationRoute

ROUTE_VALUES = [r.value for r in AdministrationRoute]

class SpeciesDosageSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    species = fields.Str(required=True, validate=validate.OneOf(ALL_SPECIES))
    dosage = fields.Float(required=True,
                          validate=validate.Range(min=0, min_inclusive=False, error="용량(mg/kg)은 0보다 커야 합니다."),
                          error_messages={"invalid": "용량(mg/kg)은 0보다 커야 합니다."})

class DrugFormSchema(Schema):
    """POST /api/drugs, PUT /api/drugs/<id> 요청 본문 스키마."""
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(required=True, validate=not_blank("약물 이름은 필수입니다."),
                      error_messages={"required": "약물 이름은 필수입니다."})
    dosages = fields.List(fields.Nested(SpeciesDosageSchema), required=True,
                          validate=validate.Length(min=1, error="최소 1개 이상의 종별 용량이 필요합니다."),
                          error_messages={"required": "최소 1개 이상의 종별 용량이 필요합니다."})
    routes = fields.List(fields.Str(validate=validate.OneOf(ROUTE_VALUES)), required=True,
                         validate=validate.Length(min=1, error="투여 경로를 1개 이상 선택하세요."),
                         error_messages={"required": "투여 경로를 1개 이상 선택하세요."})

    @pre_load
    def preprocess_data(self, data, **kwargs):
        return strip_strings(data, 'name')

    @validates_schema(skip_on_field_errors=False)
    def validate_unique_species(self, data, **kwargs):
        """같은 종에 대한 용량은 하나만 허용됩니다."""
        species = [d['species'] for d in data.get('dosages') or [] if 'species' in d]
        if len(species) != len(set(species)):
            raise ValidationError("같은 종에 대한 용량이 중복되었습니다.", field_name='dosages')
