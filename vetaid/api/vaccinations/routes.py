# vetaid/api/vaccinations/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app, Response
from marshmallow import ValidationError

from vetaid.api.common import (
    validation_error_response,
    search_term,
    confirmation_given,
    confirmation_required_response,
)
from vetaid.utils.datetime_utils import DateTimeUtils
from .schemas import (
    VaccinationFormSchema,
    CalendarQuerySchema,
    OnDateQuerySchema,
    CalendarCellSchema
)

vaccinations_bp = Blueprint('vaccinations_bp', __name__)

@vaccinations_bp.route('/', methods=['POST'])
def create_vaccination():
    """접종 기록 등록 API. 회차 일정은 1차 접종일과 간격으로 자동 생성됩니다."""
    service = current_app.services['vaccinations']
    try:
        form = VaccinationFormSchema().load(request.get_json(silent=True) or {})
        vaccination = service.create_vaccination(form)
        return jsonify(vaccination.to_dict()), 201
    except ValidationError as err:
        return validation_error_response(err)
    except Exception as e:
        logging.error(f"Vaccination create API error: {e}", exc_info=True)
        return jsonify({"error_code": "SAVE_FAILED", "message": "접종 기록 저장 중 오류가 발생했습니다."}), 500

@vaccinations_bp.route('/', methods=['GET'])
def list_vaccinations():
    """접종 기록 목록. ?q= 로 동물 ID/백신 종류/종/나이 검색."""
    service = current_app.services['vaccinations']
    vaccinations = service.list_vaccinations(search_term())
    return jsonify([v.to_dict() for v in vaccinations]), 200

@vaccinations_bp.route('/<string:vaccination_id>', methods=['GET'])
def get_vaccination(vaccination_id: str):
    service = current_app.services['vaccinations']
    try:
        vaccination = service.get_vaccination(vaccination_id)
        return jsonify(service.to_detail_dict(vaccination)), 200
    except FileNotFoundError as e:
        return jsonify({"error_code": "NOT_FOUND", "message": str(e)}), 404

@vaccinations_bp.route('/<string:vaccination_id>', methods=['PUT'])
def update_vaccination(vaccination_id: str):
    """접종 기록 수정 API. 기존 회차의 투여 여부는 그대로 유지됩니다."""
    service = current_app.services['vaccinations']
    try:
        form = VaccinationFormSchema().load(request.get_json(silent=True) or {})
        vaccination = service.update_vaccination(vaccination_id, form)
        return jsonify(vaccination.to_dict()), 200
    except ValidationError as err:
        return validation_error_response(err)
    except FileNotFoundError as e:
        return jsonify({"error_code": "NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"Vaccination update API error (id: {vaccination_id}): {e}", exc_info=True)
        return jsonify({"error_code": "SAVE_FAILED", "message": "접종 기록 수정 중 오류가 발생했습니다."}), 500

@vaccinations_bp.route('/<string:vaccination_id>', methods=['DELETE'])
def delete_vaccination(vaccination_id: str):
    if not confirmation_given():
        return confirmation_required_response("접종 기록")
    service = current_app.services['vaccinations']
    try:
        service.delete_vaccination(vaccination_id)
        return Response(status=204)
    except FileNotFoundError as e:
        return jsonify({"error_code": "NOT_FOUND", "message": str(e)}), 404

@vaccinations_bp.route('/calendar', methods=['GET'])
def get_calendar():
    """월간 접종 달력 (?year=2025&month=1, month 는 1~12)."""
    service = current_app.services['vaccinations']
    try:
        query = CalendarQuerySchema().load(request.args)
        cells = service.get_calendar(query['year'], query['month'])
        return jsonify({
            "year": query['year'],
            "month": query['month'],
            "days": CalendarCellSchema(many=True).dump(cells)
        }), 200
    except ValidationError as err:
        return validation_error_response(err)

@vaccinations_bp.route('/on-date', methods=['GET'])
def get_vaccinations_on_date():
    """선택한 날짜(?date=YYYY-MM-DD)에 예정된 접종 회차 목록."""
    service = current_app.services['vaccinations']
    try:
        query = OnDateQuerySchema().load(request.args)
        day = DateTimeUtils.parse_date_string(query['date'])
        return jsonify({
            "date": query['date'],
            "vaccinations": service.get_vaccinations_on_date(day)
        }), 200
    except ValidationError as err:
        return validation_error_response(err)
    except ValueError as e:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": {"date": str(e)}}), 400

@vaccinations_bp.route('/upcoming', methods=['GET'])
def get_upcoming_doses():
    """앞으로 3일 이내에 예정된 미투여 회차."""
    service = current_app.services['vaccinations']
    return jsonify(service.get_upcoming_doses()), 200
