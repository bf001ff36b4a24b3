# vetaid/api/procedures/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app, Response
from marshmallow import ValidationError

from vetaid.api.common import (
    validation_error_response,
    search_term,
    confirmation_given,
    confirmation_required_response,
)
from .schemas import TestProcedureFormSchema

procedures_bp = Blueprint('procedures_bp', __name__)

@procedures_bp.route('/', methods=['POST'])
def create_procedure():
    """검사 절차 등록 API."""
    service = current_app.services['procedures']
    try:
        form = TestProcedureFormSchema().load(request.get_json(silent=True) or {})
        procedure = service.create_procedure(form)
        return jsonify(procedure.to_dict()), 201
    except ValidationError as err:
        return validation_error_response(err)
    except Exception as e:
        logging.error(f"Test procedure create API error: {e}", exc_info=True)
        return jsonify({"error_code": "SAVE_FAILED", "message": "검사 절차 저장 중 오류가 발생했습니다."}), 500

@procedures_bp.route('/', methods=['GET'])
def list_procedures():
    service = current_app.services['procedures']
    return jsonify([p.to_dict() for p in service.list_procedures(search_term())]), 200

@procedures_bp.route('/<string:procedure_id>', methods=['GET'])
def get_procedure(procedure_id: str):
    service = current_app.services['procedures']
    try:
        return jsonify(service.get_procedure(procedure_id).to_dict()), 200
    except FileNotFoundError as e:
        return jsonify({"error_code": "NOT_FOUND", "message": str(e)}), 404

@procedures_bp.route('/<string:procedure_id>', methods=['PUT'])
def update_procedure(procedure_id: str):
    service = current_app.services['procedures']
    try:
        form = TestProcedureFormSchema().load(request.get_json(silent=True) or {})
        procedure = service.update_procedure(procedure_id, form)
        return jsonify(procedure.to_dict()), 200
    except ValidationError as err:
        return validation_error_response(err)
    except FileNotFoundError as e:
        return jsonify({"error_code": "NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"Test procedure update API error (id: {procedure_id}): {e}", exc_info=True)
        return jsonify({"error_code": "SAVE_FAILED", "message": "검사 절차 수정 중 오류가 발생했습니다."}), 500

@procedures_bp.route('/<string:procedure_id>', methods=['DELETE'])
def delete_procedure(procedure_id: str):
    if not confirmation_given():
        return confirmation_required_response("검사 절차")
    service = current_app.services['procedures']
    try:
        service.delete_procedure(procedure_id)
        return Response(status=204)
    except FileNotFoundError as e:
        return jsonify({"error_code": "NOT_FOUND", "message": str(e)}), 404
