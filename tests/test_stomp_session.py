import logging

from gift_stomp.exceptions import TransportError
from gift_stomp.frame_codec import build_connect, build_disconnect, build_send, build_subscribe
from gift_stomp.models import ConnectionState, GiftEventRequest, GiftStatus
from gift_stomp.stomp_session import StompSession

from .conftest import GIFT_EVENTS_JSON, FakeTransport, RecordingObserver, message_frame


CONNECTED = "CONNECTED\nversion:1.1\nheart-beat:0,0\n\n\x00"


def test_initial_state_is_disconnected(session, transport):
    assert session.state == ConnectionState.DISCONNECTED
    assert transport.listener is session
    assert session.pending_frames == []


def test_connect_only_opens_transport(session, transport):
    session.connect()

    assert transport.open_calls == 1
    assert transport.sent == []
    assert session.state == ConnectionState.DISCONNECTED


def test_socket_open_sends_connect_immediately(session, transport):
    session.subscribe("/topic/x")

    session.on_socket_open()

    assert session.state == ConnectionState.SOCKET_OPEN
    # CONNECT는 큐를 거치지 않는다
    assert transport.sent == [build_connect()]
    assert session.pending_frames == [build_subscribe("sub-0", "/topic/x")]


def test_requests_before_ready_are_queued_then_flushed_in_order(session, transport, observer):
    # 1) 연결 전 구독/발행 요청은 큐에 쌓인다
    session.subscribe("/topic/x")
    session.publish("/topic/y", {"a": 1})

    expected_subscribe = build_subscribe("sub-0", "/topic/x")
    expected_send = build_send("/topic/y", '{"a":1}')
    assert session.pending_frames == [expected_subscribe, expected_send]
    assert transport.sent == []

    # 2) 소켓이 열리면 CONNECT만 전송
    session.on_socket_open()
    assert transport.sent == [build_connect()]

    # 3) CONNECTED 수신 시 요청 순서대로 전송
    session.on_text_received("CONNECTED\n\n\x00")

    assert session.state == ConnectionState.READY
    assert transport.sent == [build_connect(), expected_subscribe, expected_send]
    assert session.pending_frames == []
    assert observer.connected == 1


def test_ready_session_sends_immediately(ready_session, transport):
    ready_session.subscribe("/topic/x")
    ready_session.publish("/topic/y", {"a": 1})

    assert transport.sent == [
        build_subscribe("sub-0", "/topic/x"),
        build_send("/topic/y", '{"a":1}'),
    ]
    assert ready_session.pending_frames == []


def test_subscribe_twice_sends_two_frames(ready_session, transport):
    ready_session.subscribe("/topic/x")
    ready_session.subscribe("/topic/x")

    assert len(transport.sent) == 2


def test_publish_pydantic_payload_uses_json_aliases(ready_session, transport):
    request = GiftEventRequest(
        member_uuid="m-1", longitude="127.0", latitude="37.5", start_date="", end_date=""
    )

    ready_session.publish("/pub/gift/events/m-1", request)

    sent = transport.sent[0]
    assert sent.startswith("SEND\ndestination:/pub/gift/events/m-1\n")
    assert '"memberUuid":"m-1"' in sent
    assert '"category":"ALL"' in sent


def test_duplicate_connected_is_noop(ready_session, transport, observer):
    ready_session.on_text_received(CONNECTED)

    assert ready_session.state == ConnectionState.READY
    assert transport.sent == []
    assert observer.connected == 1


def test_connected_while_disconnected_is_ignored(session, transport, observer):
    session.subscribe("/topic/x")

    session.on_text_received(CONNECTED)

    assert session.state == ConnectionState.DISCONNECTED
    assert transport.sent == []
    assert len(session.pending_frames) == 1
    assert observer.connected == 0


def test_message_is_forwarded_to_observer(ready_session, observer):
    ready_session.on_text_received(message_frame(GIFT_EVENTS_JSON))

    assert len(observer.gift_events) == 1
    response = observer.gift_events[0]
    gift = response.gift_category.receive.basket.both[0]
    assert gift.gift_name == "커피 쿠폰"
    assert gift.status == GiftStatus.READY
    assert ready_session.state == ConnectionState.READY


def test_undecodable_message_is_dropped(ready_session, observer, caplog):
    with caplog.at_level(logging.ERROR):
        ready_session.on_text_received(message_frame('{"a": 1}'))
        ready_session.on_text_received(message_frame("not json"))

    assert observer.gift_events == []
    assert ready_session.state == ConnectionState.READY
    assert "Error decoding message" in caplog.text


def test_undecodable_message_does_not_change_socket_open_state(session, observer):
    session.on_socket_open()

    session.on_text_received(message_frame("{"))

    assert session.state == ConnectionState.SOCKET_OPEN
    assert observer.gift_events == []


def test_malformed_frame_is_discarded(session, transport, observer):
    session.on_socket_open()

    session.on_text_received("CONNECTED\x00")

    assert session.state == ConnectionState.SOCKET_OPEN
    assert observer.connected == 0
    assert observer.disconnects == []


def test_heartbeat_is_ignored(ready_session, transport, observer):
    ready_session.on_text_received("\n")
    ready_session.on_text_received("\r\n")

    assert ready_session.state == ConnectionState.READY
    assert transport.sent == []


def test_error_frame_does_not_change_state(ready_session, observer):
    ready_session.on_text_received("ERROR\nmessage:bad destination\n\ndetails\x00")

    assert ready_session.state == ConnectionState.READY
    assert observer.disconnects == []


def test_socket_closed_reports_transport_error(ready_session, observer):
    ready_session.on_socket_closed("timeout", 1006)

    assert ready_session.state == ConnectionState.DISCONNECTED
    assert len(observer.disconnects) == 1
    error = observer.disconnects[0]
    assert isinstance(error, TransportError)
    assert error.code == 1006
    assert error.message == "timeout"


def test_normal_closure_keeps_reason_and_code(ready_session, observer):
    ready_session.on_socket_closed("session expired", 1000)

    assert ready_session.state == ConnectionState.DISCONNECTED
    error = observer.disconnects[0]
    assert isinstance(error, TransportError)
    assert error.code == 1000
    assert error.message == "session expired"


def test_transport_error_is_forwarded(ready_session, observer):
    error = TransportError("Connection failed: refused")

    ready_session.on_transport_error(error)

    assert ready_session.state == ConnectionState.DISCONNECTED
    assert observer.disconnects == [error]


def test_disconnect_is_optimistic(ready_session, transport, observer):
    ready_session.disconnect()

    assert ready_session.state == ConnectionState.DISCONNECTED
    assert transport.sent == [build_disconnect()]
    assert transport.close_calls == 1
    # 트랜스포트가 종료를 알리기 전까지 옵저버는 호출되지 않는다
    assert observer.disconnects == []


def test_disconnect_keeps_pending_frames_for_next_connection(session, transport):
    session.on_socket_open()
    session.subscribe("/topic/x")

    session.disconnect()

    assert session.state == ConnectionState.DISCONNECTED
    assert transport.sent == [build_connect()]
    assert session.pending_frames == [build_subscribe("sub-0", "/topic/x")]

    # 재연결 후 CONNECTED에서 전송
    session.connect()
    session.on_socket_open()
    session.on_text_received(CONNECTED)

    assert transport.sent[-1] == build_subscribe("sub-0", "/topic/x")
    assert session.pending_frames == []


def test_frames_after_close_are_queued_again(ready_session, transport):
    ready_session.on_socket_closed("gone", 1006)

    ready_session.subscribe("/topic/x")

    assert transport.sent == []
    assert len(ready_session.pending_frames) == 1


def test_observer_is_held_weakly(transport):
    observer = RecordingObserver()
    session = StompSession(transport, observer)
    assert session.observer is observer

    del observer

    assert session.observer is None
    # 옵저버가 없어도 이벤트 처리는 계속된다
    session.on_socket_open()
    session.on_text_received(CONNECTED)
    assert session.state == ConnectionState.READY


def test_set_observer_replaces_single_observer(session, observer):
    other = RecordingObserver()

    session.set_observer(other)
    session.on_socket_open()
    session.on_text_received(CONNECTED)

    assert other.connected == 1
    assert observer.connected == 0


def test_observer_exception_does_not_break_session(transport):
    class FailingObserver(RecordingObserver):
        def on_connected(self) -> None:
            raise RuntimeError("boom")

    observer = FailingObserver()
    session = StompSession(transport, observer)
    session.subscribe("/topic/x")

    session.on_socket_open()
    session.on_text_received(CONNECTED)

    assert session.state == ConnectionState.READY
    assert session.pending_frames == []


def test_subscribe_from_on_connected_follows_queued_frames():
    transport = FakeTransport()

    class SubscribingObserver(RecordingObserver):
        def on_connected(self) -> None:
            super().on_connected()
            session.subscribe("/topic/late")

    observer = SubscribingObserver()
    session = StompSession(transport, observer)
    session.publish("/topic/y", {"a": 1})

    session.on_socket_open()
    session.on_text_received(CONNECTED)

    assert transport.sent == [
        build_connect(),
        build_send("/topic/y", '{"a":1}'),
        build_subscribe("sub-0", "/topic/late"),
    ]
