# vetaid/api/prescriptions/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app, Response, render_template
from marshmallow import ValidationError

from vetaid.api.common import (
    validation_error_response,
    search_term,
    confirmation_given,
    confirmation_required_response,
)
from .schemas import PrescriptionCalculateSchema, PrescriptionFormSchema

prescriptions_bp = Blueprint('prescriptions_bp', __name__)

def _lookup_error_response(e: LookupError):
    return jsonify({"error_code": "DOSAGE_NOT_AVAILABLE", "message": str(e)}), 422

def _drug_not_found_response(e: FileNotFoundError):
    return jsonify({"error_code": "DRUG_NOT_FOUND", "message": str(e)}), 404

@prescriptions_bp.route('/calculate', methods=['POST'])
def calculate_prescription():
    """처방 작성 중 선택한 약물들의 투여량(mg/kg * kg)을 미리 계산합니다. 저장하지 않습니다."""
    service = current_app.services['prescriptions']
    try:
        form = PrescriptionCalculateSchema().load(request.get_json(silent=True) or {})
        return jsonify(service.calculate(form)), 200
    except ValidationError as err:
        return validation_error_response(err)
    except FileNotFoundError as e:
        return _drug_not_found_response(e)
    except LookupError as e:
        return _lookup_error_response(e)

@prescriptions_bp.route('/', methods=['POST'])
def create_prescription():
    """처방 저장 API. 각 약물의 calculatedDose 는 이 시점 값으로 고정됩니다."""
    service = current_app.services['prescriptions']
    try:
        form = PrescriptionFormSchema().load(request.get_json(silent=True) or {})
        prescription = service.create_prescription(form)
        return jsonify(prescription.to_dict()), 201
    except ValidationError as err:
        return validation_error_response(err)
    except FileNotFoundError as e:
        return _drug_not_found_response(e)
    except LookupError as e:
        return _lookup_error_response(e)
    except Exception as e:
        logging.error(f"Prescription create API error: {e}", exc_info=True)
        return jsonify({"error_code": "SAVE_FAILED", "message": "처방 저장 중 오류가 발생했습니다."}), 500

@prescriptions_bp.route('/', methods=['GET'])
def list_prescriptions():
    service = current_app.services['prescriptions']
    return jsonify([p.to_dict() for p in service.list_prescriptions(search_term())]), 200

@prescriptions_bp.route('/<string:prescription_id>', methods=['GET'])
def get_prescription(prescription_id: str):
    service = current_app.services['prescriptions']
    try:
        return jsonify(service.get_prescription(prescription_id).to_dict()), 200
    except FileNotFoundError as e:
        return jsonify({"error_code": "NOT_FOUND", "message": str(e)}), 404

@prescriptions_bp.route('/<string:prescription_id>', methods=['PUT'])
def update_prescription(prescription_id: str):
    service = current_app.services['prescriptions']
    # 처방 자체가 없으면 약물 누락(DRUG_NOT_FOUND)과 구분해 NOT_FOUND 로 응답
    try:
        service.get_prescription(prescription_id)
    except FileNotFoundError as e:
        return jsonify({"error_code": "NOT_FOUND", "message": str(e)}), 404
    try:
        form = PrescriptionFormSchema().load(request.get_json(silent=True) or {})
        prescription = service.update_prescription(prescription_id, form)
        return jsonify(prescription.to_dict()), 200
    except ValidationError as err:
        return validation_error_response(err)
    except FileNotFoundError as e:
        return _drug_not_found_response(e)
    except LookupError as e:
        return _lookup_error_response(e)
    except Exception as e:
        logging.error(f"Prescription update API error (id: {prescription_id}): {e}", exc_info=True)
        return jsonify({"error_code": "SAVE_FAILED", "message": "처방 수정 중 오류가 발생했습니다."}), 500

@prescriptions_bp.route('/<string:prescription_id>', methods=['DELETE'])
def delete_prescription(prescription_id: str):
    if not confirmation_given():
        return confirmation_required_response("처방")
    service = current_app.services['prescriptions']
    try:
        service.delete_prescription(prescription_id)
        return Response(status=204)
    except FileNotFoundError as e:
        return jsonify({"error_code": "NOT_FOUND", "message": str(e)}), 404

@prescriptions_bp.route('/<string:prescription_id>/print', methods=['GET'])
def print_prescription(prescription_id: str):
    """인쇄용 처방전 HTML."""
    service = current_app.services['prescriptions']
    try:
        context = service.build_print_context(prescription_id)
        return render_template('prescription_print.html', **context), 200
    except FileNotFoundError as e:
        return jsonify({"error_code": "NOT_FOUND", "message": str(e)}), 404
