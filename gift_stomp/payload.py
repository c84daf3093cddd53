"""
JSON payload capability
애플리케이션 페이로드 직렬화/역직렬화
"""
import json
from typing import Any

from pydantic import BaseModel, ValidationError

from .exceptions import DeserializationError
from .models import GiftEventResponse


def serialize_payload(payload: Any) -> str:
    """페이로드를 JSON 문자열로 변환"""
    if isinstance(payload, BaseModel):
        return payload.model_dump_json(by_alias=True)
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def deserialize_gift_events(body: str) -> GiftEventResponse:
    """MESSAGE 바디를 GiftEventResponse로 변환"""
    try:
        return GiftEventResponse.model_validate_json(body)
    except ValidationError as e:
        # JSON 문법 오류도 ValidationError로 올라온다
        raise DeserializationError(f"Invalid gift event payload: {e.error_count()} error(s)") from e
