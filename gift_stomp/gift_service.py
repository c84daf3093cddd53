"""
Gift event service
선물 이벤트 토픽 구독 및 요청 발행
"""
import logging
from typing import Optional

from .config import config
from .interfaces import StompSessionObserver
from .models import ConnectionState, GiftEventRequest
from .stomp_session import StompSession
from .transport import WebSocketTransport


class GiftEventService:
    """선물 이벤트 서비스

    전역 싱글톤 대신 호출자가 생성하고 소유한다.
    """

    def __init__(self, session: StompSession):
        self.session = session
        self.logger = logging.getLogger("GiftEventService")

    @classmethod
    def create(cls, observer: StompSessionObserver, url: Optional[str] = None) -> "GiftEventService":
        """WebSocket 트랜스포트를 사용하는 서비스 생성"""
        transport = WebSocketTransport(url or config.websocket_url)
        return cls(StompSession(transport, observer))

    # =============================================================================
    # 연결 관리
    # =============================================================================

    def connect(self) -> None:
        self.session.connect()

    def disconnect(self) -> None:
        self.session.disconnect()

    @property
    def state(self) -> ConnectionState:
        return self.session.state

    # =============================================================================
    # 선물 이벤트
    # =============================================================================

    @staticmethod
    def gift_topic(member_uuid: str) -> str:
        return config.gift_topic_template.format(member_uuid=member_uuid)

    @staticmethod
    def gift_destination(member_uuid: str) -> str:
        return config.gift_publish_template.format(member_uuid=member_uuid)

    def subscribe_to_gift_events(self, member_uuid: str) -> None:
        """회원의 선물 이벤트 토픽 구독"""
        topic = self.gift_topic(member_uuid)
        self.logger.info(f"🎁 Subscribing to gift events: {topic}")
        self.session.subscribe(topic)

    def send_gift_event_request(
        self,
        member_uuid: str,
        longitude: str,
        latitude: str,
        start_date: str,
        end_date: str,
        category: Optional[str] = None
    ) -> None:
        """선물 이벤트 조회 요청 발행"""
        request = GiftEventRequest(
            member_uuid=member_uuid,
            longitude=longitude,
            latitude=latitude,
            category=category or config.default_category,
            start_date=start_date,
            end_date=end_date
        )
        self.session.publish(self.gift_destination(member_uuid), request)
