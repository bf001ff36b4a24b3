# vetaid/api/vaccinations/schemas.py
from marshmallow import Schema, fields, validate, validates_schema, ValidationError, pre_load, EXCLUDE

from vetaid.api.common import not_blank, strip_strings
from vetaid.models.animal import ALL_SPECIES, Sex
from vetaid.utils.datetime_utils import DateTimeUtils

DATE_REGEX = r'^\d{4}-\d{2}-\d{2}$'
TIME_REGEX = r'^\d{1,2}:\d{2}$'

class VaccinationFormSchema(Schema):
    """
    POST /api/vaccinations, PUT /api/vaccinations/<id> 요청 본문(접종 등록/수정 폼) 스키마.
    모든 필드를 검사한 뒤 오류를 한 번에 반환합니다.
    """
    class Meta:
        unknown = EXCLUDE

    animalId = fields.Str(required=True, validate=not_blank("동물 ID는 필수입니다."),
                          error_messages={"required": "동물 ID는 필수입니다."})
    age = fields.Float(required=True,
                       validate=validate.Range(min=0, min_inclusive=False, error="나이는 양수여야 합니다."),
                       error_messages={"required": "나이는 필수입니다.", "invalid": "나이는 양수여야 합니다."})
    sex = fields.Str(load_default=Sex.MALE.value, validate=validate.OneOf([s.value for s in Sex]))
    isPregnant = fields.Bool(load_default=False)
    ownerPhone = fields.Str(required=True, validate=not_blank("보호자 연락처는 필수입니다."),
                            error_messages={"required": "보호자 연락처는 필수입니다."})
    species = fields.Str(load_default='cow', validate=validate.OneOf(ALL_SPECIES))
    vaccineDate = fields.Str(load_default=DateTimeUtils.get_today_string,
                             validate=validate.Regexp(DATE_REGEX, error="날짜 형식이 올바르지 않습니다 (YYYY-MM-DD)."))
    vaccineTime = fields.Str(load_default=DateTimeUtils.get_current_time,
                             validate=validate.Regexp(TIME_REGEX, error="시간 형식이 올바르지 않습니다 (HH:MM)."))
    vaccineType = fields.Str(required=True, validate=not_blank("백신 종류는 필수입니다."),
                             error_messages={"required": "백신 종류는 필수입니다."})
    totalDoses = fields.Int(load_default=1,
                            validate=validate.Range(min=1, error="최소 1회 이상의 접종이 필요합니다."))
    daysInterval = fields.Int(load_default=0)
    notes = fields.Str(load_default=None, allow_none=True)

    @pre_load
    def preprocess_data(self, data, **kwargs):
        """문자열 입력의 앞뒤 공백 제거."""
        return strip_strings(data, 'animalId', 'ownerPhone', 'vaccineType', 'vaccineDate', 'vaccineTime')

    @validates_schema(skip_on_field_errors=False)
    def validate_schedule(self, data, **kwargs):
        """다회 접종 간격과 1차 접종 일시 검증."""
        errors = {}
        total_doses = data.get('totalDoses')
        if total_doses is not None and total_doses > 1 and data.get('daysInterval', 0) <= 0:
            errors['daysInterval'] = ["다회 접종에는 0보다 큰 접종 간격이 필요합니다."]

        if data.get('vaccineDate') and data.get('vaccineTime'):
            try:
                DateTimeUtils.combine_date_and_time(data['vaccineDate'], data['vaccineTime'])
            except ValueError as e:
                errors['vaccineDate'] = [str(e)]

        if errors:
            raise ValidationError(errors)

class CalendarQuerySchema(Schema):
    """GET /api/vaccinations/calendar 쿼리 파라미터 (month 는 1~12)."""
    class Meta:
        unknown = EXCLUDE

    year = fields.Int(load_default=lambda: DateTimeUtils.today().year,
                      validate=validate.Range(min=1, max=9999))
    month = fields.Int(load_default=lambda: DateTimeUtils.today().month,
                       validate=validate.Range(min=1, max=12))

class OnDateQuerySchema(Schema):
    """GET /api/vaccinations/on-date 쿼리 파라미터."""
    class Meta:
        unknown = EXCLUDE

    date = fields.Str(required=True, validate=validate.Regexp(DATE_REGEX, error="날짜 형식이 올바르지 않습니다 (YYYY-MM-DD)."))

class CalendarCellSchema(Schema):
    """달력 한 칸 응답 스키마."""
    date = fields.Date()
    isCurrentMonth = fields.Bool()
    isToday = fields.Bool()
    hasVaccinations = fields.Bool()
