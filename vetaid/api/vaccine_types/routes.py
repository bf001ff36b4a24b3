# vetaid/api/vaccine_types/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app, Response
from marshmallow import ValidationError

from vetaid.api.common import validation_error_response, confirmation_given, confirmation_required_response
from .schemas import VaccineTypeFormSchema

vaccine_types_bp = Blueprint('vaccine_types_bp', __name__)

@vaccine_types_bp.route('/', methods=['GET'])
def list_vaccine_types():
    service = current_app.services['vaccine_types']
    return jsonify([v.to_dict() for v in service.list_vaccine_types()]), 200

@vaccine_types_bp.route('/', methods=['POST'])
def create_vaccine_type():
    service = current_app.services['vaccine_types']
    try:
        form = VaccineTypeFormSchema().load(request.get_json(silent=True) or {})
        return jsonify(service.create_vaccine_type(form).to_dict()), 201
    except ValidationError as err:
        return validation_error_response(err)
    except Exception as e:
        logging.error(f"Vaccine type create API error: {e}", exc_info=True)
        return jsonify({"error_code": "SAVE_FAILED", "message": "백신 종류 저장 중 오류가 발생했습니다."}), 500

@vaccine_types_bp.route('/<string:vaccine_type_id>', methods=['DELETE'])
def delete_vaccine_type(vaccine_type_id: str):
    if not confirmation_given():
        return confirmation_required_response("백신 종류")
    service = current_app.services['vaccine_types']
    try:
        service.delete_vaccine_type(vaccine_type_id)
        return Response(status=204)
    except FileNotFoundError as e:
        return jsonify({"error_code": "NOT_FOUND", "message": str(e)}), 404
