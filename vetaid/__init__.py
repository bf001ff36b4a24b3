# vetaid/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

# - 설정
from vetaid.core.config import config_by_name

# - API 블루프린트
from vetaid.api.vaccinations.routes import vaccinations_bp
from vetaid.api.procedures.routes import procedures_bp
from vetaid.api.drugs.routes import drugs_bp
from vetaid.api.prescriptions.routes import prescriptions_bp
from vetaid.api.vaccine_types.routes import vaccine_types_bp
from vetaid.api.settings.routes import settings_bp
from vetaid.api.notifications.routes import notifications_bp

# - 서비스 모듈
from vetaid.api.common import first_errors
from vetaid.services.record_store import RecordStore, InMemoryKeyValueStore, JsonFileKeyValueStore
from vetaid.services.notification_service import NotificationService
from vetaid.services.demo_data import seed_demo_data
from vetaid.api.vaccinations.services import VaccinationService
from vetaid.api.procedures.services import ProcedureService
from vetaid.api.drugs.services import DrugService
from vetaid.api.prescriptions.services import PrescriptionService
from vetaid.api.vaccine_types.services import VaccineTypeService
from vetaid.api.settings.services import SettingsService

def _create_kv_store(app):
    backend = app.config['STORAGE_BACKEND']
    if backend == 'memory':
        return InMemoryKeyValueStore()
    if backend == 'file':
        return JsonFileKeyValueStore(app.config['DATA_FILE_PATH'])
    raise ValueError(f"지원하지 않는 저장소 백엔드입니다: {backend}")

def create_app(config_name=None):
    """
    Flask 애플리케이션 팩토리 함수.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    # 4-1. 다른 서비스의 기반이 되는 저장소/알림 서비스 먼저 생성
    try:
        record_store = RecordStore(_create_kv_store(app))
        app.services['records'] = record_store
        logging.info(f"Record store initialized ({app.config['STORAGE_BACKEND']} backend)")
    except Exception as e:
        logging.error(f"Failed to initialize record store: {e}")
        raise

    auto_grant = app.config['NOTIFICATIONS_AUTO_GRANT']
    notification_service = NotificationService(
        permission=app.config['NOTIFICATION_PERMISSION'],
        prompt=lambda: auto_grant,
        lead_days=app.config['REMINDER_LEAD_DAYS']
    )
    # 시작 시 한 번 권한 확인 (결과와 무관하게 앱은 계속 동작)
    notification_service.request_permission()
    app.services['notifications'] = notification_service

    # 4-2. 저장소를 주입받는 도메인 서비스 생성
    app.services['vaccinations'] = VaccinationService(record_store, notification_service)
    app.services['procedures'] = ProcedureService(record_store)
    app.services['drugs'] = DrugService(record_store)
    app.services['prescriptions'] = PrescriptionService(record_store, drug_service=app.services['drugs'])
    app.services['vaccine_types'] = VaccineTypeService(record_store)
    app.services['settings'] = SettingsService(record_store)

    if app.config['SEED_DEMO_DATA']:
        seed_demo_data(record_store)

    # =====================================================================================
    # 5. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(vaccinations_bp, url_prefix='/api/vaccinations')
    app.register_blueprint(procedures_bp, url_prefix='/api/tests')
    app.register_blueprint(drugs_bp, url_prefix='/api/drugs')
    app.register_blueprint(prescriptions_bp, url_prefix='/api/prescriptions')
    app.register_blueprint(vaccine_types_bp, url_prefix='/api/vaccine-types')
    app.register_blueprint(settings_bp, url_prefix='/api/settings')
    app.register_blueprint(notifications_bp, url_prefix='/api/notifications')

    # =====================================================================================
    # 6. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": first_errors(err.messages)}
        return jsonify(response), 400

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 404/405 등 HTTP 예외는 그대로 돌려줌
        if isinstance(err, HTTPException):
            return err
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 7. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
