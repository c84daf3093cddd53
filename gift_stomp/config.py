"""
Configuration settings for Gift STOMP Client
"""
from pydantic_settings import BaseSettings


class GiftStompConfig(BaseSettings):
    """Gift STOMP 클라이언트 설정"""

    # WebSocket 연결 설정
    websocket_url: str = "ws://localhost:9010/wyftws"
    connection_timeout: float = 5.0

    # STOMP 핸드셰이크 설정
    accept_versions: str = "1.1,1.0"
    heartbeat: str = "10000,10000"
    subscription_id: str = "sub-0"

    # 선물 이벤트 목적지
    gift_topic_template: str = "/topic/gift/events/{member_uuid}"
    gift_publish_template: str = "/pub/gift/events/{member_uuid}"
    default_category: str = "ALL"

    # 로깅 설정
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    model_config = {
        "env_prefix": "GIFT_STOMP_",
        "env_file": ".env",
        "extra": "ignore",
    }


# 전역 설정 인스턴스
config = GiftStompConfig()
