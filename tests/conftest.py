from typing import List, Optional

import pytest

from gift_stomp.interfaces import StompSessionObserver, StompTransport, TransportListener
from gift_stomp.models import GiftEventResponse
from gift_stomp.stomp_session import StompSession


GIFT_EVENTS_JSON = """{
  "giftCategory": {
    "RECEIVE": {
      "Basket": {
        "both": [
          {
            "giftName": "커피 쿠폰",
            "latitude": 37.4979,
            "longitude": 127.0276,
            "activate": true,
            "insertDate": "2024-11-19 10:00:00",
            "giftKey": 42,
            "startDate": "2024-11-19",
            "endDate": "2024-12-19",
            "status": "READY"
          }
        ]
      },
      "Video": {
        "perOnly": [
          {
            "giftName": "영상 편지",
            "activate": false,
            "insertDate": "2024-11-18 09:00:00",
            "giftKey": 7,
            "status": "PLAY",
            "startDate": "2024-11-18",
            "endDate": "2024-11-30"
          }
        ]
      }
    },
    "SEND": {
      "Default": {
        "no": [
          {
            "giftName": "꽃다발",
            "activate": true,
            "insertDate": "2024-11-17 12:30:00",
            "giftKey": 3,
            "status": "OPEN"
          }
        ]
      }
    }
  }
}"""


class FakeTransport(StompTransport):
    """전송 요청을 기록하는 트랜스포트"""

    def __init__(self):
        self.listener: Optional[TransportListener] = None
        self.sent: List[str] = []
        self.open_calls = 0
        self.close_calls = 0

    def set_listener(self, listener: TransportListener) -> None:
        self.listener = listener

    def open(self) -> None:
        self.open_calls += 1

    def close(self) -> None:
        self.close_calls += 1

    def send_text(self, text: str) -> None:
        self.sent.append(text)


class RecordingObserver(StompSessionObserver):
    """세션 이벤트를 기록하는 옵저버"""

    def __init__(self):
        self.connected = 0
        self.disconnects: List[Optional[Exception]] = []
        self.gift_events: List[GiftEventResponse] = []

    def on_connected(self) -> None:
        self.connected += 1

    def on_disconnected(self, error: Optional[Exception] = None) -> None:
        self.disconnects.append(error)

    def on_gift_events(self, response: GiftEventResponse) -> None:
        self.gift_events.append(response)


def message_frame(body: str, destination: str = "/topic/gift/events/member-1") -> str:
    return (
        "MESSAGE\n"
        f"destination:{destination}\n"
        "subscription:sub-0\n"
        "message-id:m-1\n"
        "content-type:application/json\n"
        "\n"
        f"{body}\x00"
    )


@pytest.fixture()
def transport():
    return FakeTransport()


@pytest.fixture()
def observer():
    return RecordingObserver()


@pytest.fixture()
def session(transport, observer):
    return StompSession(transport, observer)


@pytest.fixture()
def ready_session(session, transport):
    session.on_socket_open()
    session.on_text_received("CONNECTED\nversion:1.1\n\n\x00")
    transport.sent.clear()
    return session
