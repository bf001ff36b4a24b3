# vetaid/core/config.py

import os # 'os' 모듈: 환경 변수를 읽기 위해 사용합니다.

def _env_flag(name, default='false'):
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes')

class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # 저장소 백엔드: 'file'(로컬 JSON 파일) 또는 'memory'(프로세스 메모리, 재시작 시 초기화)
    STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'file')
    # 'file' 백엔드가 사용할 데이터 파일 경로
    DATA_FILE_PATH = os.getenv('DATA_FILE_PATH', os.path.join(os.path.expanduser('~'), '.vetaid', 'store.json'))

    # 알림 권한 초기 상태: 'default'(아직 묻지 않음), 'granted', 'denied'
    NOTIFICATION_PERMISSION = os.getenv('NOTIFICATION_PERMISSION', 'default')
    # 'default' 상태에서 권한 요청 시 자동으로 허용할지 여부
    NOTIFICATIONS_AUTO_GRANT = _env_flag('NOTIFICATIONS_AUTO_GRANT', 'true')
    # 접종일 며칠 전에 알림을 보낼지
    REMINDER_LEAD_DAYS = int(os.getenv('REMINDER_LEAD_DAYS', 3))

    # 컬렉션이 비어 있을 때 예시 데이터를 채울지 여부
    SEED_DEMO_DATA = _env_flag('SEED_DEMO_DATA', 'true')

class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다. Config 클래스를 상속받아 공통 설정을 그대로 사용합니다."""
    DEBUG = True

class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    TESTING = True
    DEBUG = False
    # 테스트는 항상 메모리 저장소를 사용하고, 예시 데이터 없이 시작합니다.
    STORAGE_BACKEND = 'memory'
    SEED_DEMO_DATA = False
    NOTIFICATION_PERMISSION = 'denied'
    NOTIFICATIONS_AUTO_GRANT = False

# config_by_name: 문자열 키('development', 'testing')와 해당 환경의 설정 클래스를 매핑하는 딕셔너리입니다.
# vetaid/__init__.py의 create_app 함수에서 FLASK_ENV 값에 따라 적절한 설정을 선택하는 데 사용됩니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig
)
