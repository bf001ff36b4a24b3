# vetaid/api/common.py
"""모든 블루프린트가 공유하는 폼 검증/검색/삭제 확인 헬퍼."""

from typing import Any, Dict, Iterable, Optional
from flask import request, jsonify
from marshmallow import ValidationError


def first_errors(messages: Any) -> Any:
    """
    marshmallow 오류 메시지에서 필드별 첫 번째 오류만 남깁니다.
    중첩 스키마/리스트 인덱스 오류는 같은 구조로 유지합니다.
    """
    if isinstance(messages, dict):
        return {str(key): first_errors(value) for key, value in messages.items()}
    if isinstance(messages, (list, tuple)):
        return first_errors(messages[0]) if messages else None
    return messages


def validation_error_response(err: ValidationError):
    return jsonify({"error_code": "VALIDATION_ERROR", "details": first_errors(err.messages)}), 400


def not_blank(message: str = "필수 입력 항목입니다."):
    """필수 문자열 필드가 공백뿐이면 오류를 내는 validator 를 만듭니다."""
    def validator(value: Optional[str]) -> None:
        if value is None or not value.strip():
            raise ValidationError(message)
    return validator


def format_number(value: Any) -> str:
    """검색용 숫자 표기 (2.0 -> '2', 2.5 -> '2.5')"""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def matches_term(term: Optional[str], values: Iterable[Any]) -> bool:
    """대소문자 구분 없는 부분 문자열 검색. 검색어가 비어 있으면 항상 일치."""
    term = (term or '').strip().lower()
    if not term:
        return True
    return any(term in str(value).lower() for value in values if value is not None)


def search_term() -> str:
    return request.args.get('q', default='', type=str)


def confirmation_given() -> bool:
    """삭제 요청은 ?confirm=true 로 사용자 확인을 거쳐야 합니다."""
    return request.args.get('confirm', default='false').lower() in ('true', '1', 'yes')


def confirmation_required_response(entity: str):
    return jsonify({
        "error_code": "CONFIRMATION_REQUIRED",
        "message": f"정말 이 {entity}을(를) 삭제하시겠습니까? 삭제하려면 confirm=true 를 전달하세요."
    }), 409


def strip_strings(data: Dict[str, Any], *fields: str) -> Dict[str, Any]:
    """지정한 문자열 필드의 앞뒤 공백을 제거한 복사본을 반환합니다."""
    if not isinstance(data, dict):
        return data
    processed = dict(data)
    for name in fields:
        if isinstance(processed.get(name), str):
            processed[name] = processed[name].strip()
    return processed
