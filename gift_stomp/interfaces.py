"""
Collaborator contracts for the STOMP session
"""
from abc import ABC, abstractmethod
from typing import Optional

from .models import GiftEventResponse


class TransportListener(ABC):
    """트랜스포트 이벤트 수신자 (StompSession이 구현)"""

    @abstractmethod
    def on_socket_open(self) -> None: ...

    @abstractmethod
    def on_socket_closed(self, reason: str, code: int) -> None: ...

    @abstractmethod
    def on_text_received(self, raw_text: str) -> None: ...

    @abstractmethod
    def on_transport_error(self, error: Exception) -> None: ...


class StompTransport(ABC):
    """STOMP 프레임을 실어 나르는 텍스트 트랜스포트

    모든 메서드는 즉시 반환하고, 결과는 리스너 콜백으로만 전달된다.
    """

    @abstractmethod
    def set_listener(self, listener: TransportListener) -> None: ...

    @abstractmethod
    def open(self) -> None: ...

    @abstractmethod
    def close(self) -> None: ...

    @abstractmethod
    def send_text(self, text: str) -> None: ...


class StompSessionObserver(ABC):
    """세션 이벤트 구독자

    세션당 하나만 등록되며 세션은 약한 참조로만 보관한다.
    """

    @abstractmethod
    def on_connected(self) -> None: ...

    @abstractmethod
    def on_disconnected(self, error: Optional[Exception] = None) -> None: ...

    @abstractmethod
    def on_gift_events(self, response: GiftEventResponse) -> None: ...
