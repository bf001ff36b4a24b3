# vetaid/api/settings/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app, Response
from marshmallow import ValidationError

from vetaid.api.common import validation_error_response
from .schemas import ThemeSchema

settings_bp = Blueprint('settings_bp', __name__)

@settings_bp.route('/theme', methods=['GET'])
def get_theme():
    service = current_app.services['settings']
    return jsonify(ThemeSchema().dump({'theme': service.get_theme()})), 200

@settings_bp.route('/theme', methods=['PUT'])
def update_theme():
    service = current_app.services['settings']
    try:
        data = ThemeSchema().load(request.get_json(silent=True) or {})
        return jsonify({'theme': service.set_theme(data['theme'])}), 200
    except ValidationError as err:
        return validation_error_response(err)

@settings_bp.route('/export', methods=['GET'])
def export_data():
    """네 개 컬렉션 전체를 JSON 파일로 내려받습니다."""
    service = current_app.services['settings']
    return Response(
        service.export_snapshot(),
        mimetype='application/json',
        headers={'Content-Disposition': f'attachment; filename={service.export_filename()}'}
    )

@settings_bp.route('/import', methods=['POST'])
def import_data():
    """
    백업 파일 가져오기. 'file' 업로드 또는 JSON 본문을 그대로 받습니다.
    스냅샷에 포함된 컬렉션은 통째로 교체됩니다.
    """
    service = current_app.services['settings']
    upload = request.files.get('file')
    try:
        snapshot = upload.read().decode('utf-8') if upload else request.get_data(as_text=True)
    except UnicodeDecodeError as e:
        logging.warning(f"Import file is not valid UTF-8: {e}")
        snapshot = None

    if snapshot and service.import_snapshot(snapshot):
        return jsonify({"message": "데이터를 성공적으로 가져왔습니다."}), 200
    return jsonify({"error_code": "IMPORT_FAILED", "message": "데이터를 가져오지 못했습니다. 파일 형식을 확인하세요."}), 400
