# vetaid/api/drugs/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app, Response
from marshmallow import ValidationError

from vetaid.api.common import (
    validation_error_response,
    search_term,
    confirmation_given,
    confirmation_required_response,
)
from vetaid.models.animal import AnimalSpecies
from .schemas import DrugFormSchema

drugs_bp = Blueprint('drugs_bp', __name__)

@drugs_bp.route('/', methods=['POST'])
def create_drug():
    """약물 등록 API."""
    service = current_app.services['drugs']
    try:
        form = DrugFormSchema().load(request.get_json(silent=True) or {})
        drug = service.create_drug(form)
        return jsonify(drug.to_dict()), 201
    except ValidationError as err:
        return validation_error_response(err)
    except Exception as e:
        logging.error(f"Drug create API error: {e}", exc_info=True)
        return jsonify({"error_code": "SAVE_FAILED", "message": "약물 저장 중 오류가 발생했습니다."}), 500

@drugs_bp.route('/', methods=['GET'])
def list_drugs():
    """약물 목록. ?q= 이름 검색, ?species= 해당 종에 용량이 있는 약물만."""
    service = current_app.services['drugs']
    species_param = request.args.get('species')
    species = None
    if species_param:
        try:
            species = AnimalSpecies(species_param)
        except ValueError:
            return jsonify({"error_code": "VALIDATION_ERROR", "details": {"species": "알 수 없는 동물 종입니다."}}), 400
    drugs = service.list_drugs(search_term(), species=species)
    return jsonify([d.to_dict() for d in drugs]), 200

@drugs_bp.route('/<string:drug_id>', methods=['GET'])
def get_drug(drug_id: str):
    service = current_app.services['drugs']
    try:
        return jsonify(service.get_drug(drug_id).to_dict()), 200
    except FileNotFoundError as e:
        return jsonify({"error_code": "NOT_FOUND", "message": str(e)}), 404

@drugs_bp.route('/<string:drug_id>', methods=['PUT'])
def update_drug(drug_id: str):
    service = current_app.services['drugs']
    try:
        form = DrugFormSchema().load(request.get_json(silent=True) or {})
        drug = service.update_drug(drug_id, form)
        return jsonify(drug.to_dict()), 200
    except ValidationError as err:
        return validation_error_response(err)
    except FileNotFoundError as e:
        return jsonify({"error_code": "NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"Drug update API error (id: {drug_id}): {e}", exc_info=True)
        return jsonify({"error_code": "SAVE_FAILED", "message": "약물 수정 중 오류가 발생했습니다."}), 500

@drugs_bp.route('/<string:drug_id>', methods=['DELETE'])
def delete_drug(drug_id: str):
    if not confirmation_given():
        return confirmation_required_response("약물")
    service = current_app.services['drugs']
    try:
        service.delete_drug(drug_id)
        return Response(status=204)
    except FileNotFoundError as e:
        return jsonify({"error_code": "NOT_FOUND", "message": str(e)}), 404
