"""
Gift STOMP Client
WebSocket 위의 최소 STOMP 클라이언트와 선물 이벤트 서비스
"""
from .gift_service import GiftEventService
from .interfaces import StompSessionObserver, StompTransport, TransportListener
from .models import ConnectionState, GiftEventRequest, GiftEventResponse, STOMPFrame
from .stomp_session import StompSession
from .transport import WebSocketTransport

__all__ = [
    "GiftEventService",
    "StompSession",
    "WebSocketTransport",
    "StompSessionObserver",
    "StompTransport",
    "TransportListener",
    "ConnectionState",
    "GiftEventRequest",
    "GiftEventResponse",
    "STOMPFrame",
]
