"""
STOMP session over a text transport
연결 상태, 대기 프레임 큐, 옵저버 전달을 담당하는 STOMP 세션
"""
import logging
import weakref
from typing import Any, Callable, List, Optional

from .config import config
from .exceptions import DeserializationError, ParseError, TransportError
from .frame_codec import build_connect, build_disconnect, build_send, build_subscribe, parse_frame
from .interfaces import StompSessionObserver, StompTransport, TransportListener
from .models import ConnectionState, GiftEventResponse, STOMPFrame
from .payload import deserialize_gift_events, serialize_payload


class StompSession(TransportListener):
    """STOMP 세션

    CONNECTED 프레임을 받기 전까지 SUBSCRIBE/SEND 프레임은 큐에 쌓였다가
    핸드셰이크가 끝나는 순간 요청 순서대로 한 번에 전송된다.

    트랜스포트 콜백과 공개 메서드는 하나의 이벤트 루프에서 순차적으로
    호출된다고 가정한다 (스레드 안전하지 않음).
    """

    def __init__(
        self,
        transport: StompTransport,
        observer: Optional[StompSessionObserver] = None,
        serializer: Callable[[Any], str] = serialize_payload,
        deserializer: Callable[[str], GiftEventResponse] = deserialize_gift_events,
    ):
        self.transport = transport
        self.transport.set_listener(self)

        self._state = ConnectionState.DISCONNECTED
        self._pending_frames: List[str] = []
        self._observer_ref: Optional[weakref.ref] = None

        self.serializer = serializer
        self.deserializer = deserializer

        self.accept_versions = config.accept_versions
        self.heartbeat = config.heartbeat
        self.subscription_id = config.subscription_id

        self.logger = logging.getLogger("StompSession")

        if observer is not None:
            self.set_observer(observer)

    # =============================================================================
    # 옵저버 관리
    # =============================================================================

    def set_observer(self, observer: Optional[StompSessionObserver]) -> None:
        """옵저버 설정 (세션당 하나, 기존 옵저버는 교체됨)"""
        current = self.observer
        if current is not None and observer is not None and current is not observer:
            self.logger.warning("⚠️ Replacing existing session observer (single observer per session)")
        self._observer_ref = weakref.ref(observer) if observer is not None else None

    @property
    def observer(self) -> Optional[StompSessionObserver]:
        if self._observer_ref is None:
            return None
        return self._observer_ref()

    def _notify(self, callback_name: str, *args) -> None:
        """옵저버 콜백 호출 (옵저버 오류는 세션에 영향을 주지 않음)"""
        observer = self.observer
        if observer is None:
            self.logger.debug(f"No observer registered for {callback_name}")
            return
        try:
            getattr(observer, callback_name)(*args)
        except Exception as e:
            self.logger.error(f"❌ Observer {callback_name} error: {e}")

    # =============================================================================
    # 상태 조회
    # =============================================================================

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state == ConnectionState.READY

    @property
    def pending_frames(self) -> List[str]:
        """전송 대기 중인 프레임 목록 (복사본)"""
        return list(self._pending_frames)

    # =============================================================================
    # 연결 관리
    # =============================================================================

    def connect(self) -> None:
        """트랜스포트 연결 요청 (상태는 소켓이 열릴 때 바뀜)"""
        self.logger.info("📡 Requesting transport connection...")
        self.transport.open()

    def disconnect(self) -> None:
        """연결 해제

        트랜스포트의 종료 확인을 기다리지 않고 즉시 DISCONNECTED로 전환한다.
        대기 큐는 비우지 않으며, 이미 전송 요청된 프레임의 전달도 보장하지 않는다.
        """
        self.logger.info("🔌 Disconnecting STOMP session...")
        if self._state == ConnectionState.READY:
            self.transport.send_text(build_disconnect())
        self.transport.close()
        self._state = ConnectionState.DISCONNECTED

    # =============================================================================
    # 구독 및 발행
    # =============================================================================

    def subscribe(self, destination: str) -> None:
        """토픽 구독 (단일 구독 ID 사용, 중복 제거 없음)"""
        frame = build_subscribe(self.subscription_id, destination)
        self._send_or_queue(frame)
        self.logger.info(f"🎯 Subscribe requested: {destination} (ID: {self.subscription_id})")

    def publish(self, destination: str, payload: Any) -> None:
        """페이로드를 JSON으로 직렬화하여 SEND 프레임으로 발행"""
        body = self.serializer(payload)
        frame = build_send(destination, body)
        self._send_or_queue(frame)
        self.logger.info(f"📤 Publish requested: {destination}")

    def _send_or_queue(self, frame: str) -> None:
        if self._state == ConnectionState.READY:
            self.transport.send_text(frame)
        else:
            self._pending_frames.append(frame)
            self.logger.debug(f"Queued frame until STOMP handshake completes ({len(self._pending_frames)} pending)")

    def _flush_pending_frames(self) -> None:
        """대기 프레임을 요청 순서대로 전송 후 큐 비우기"""
        frames, self._pending_frames = self._pending_frames, []
        if frames:
            self.logger.info(f"📨 Flushing {len(frames)} queued frame(s)")
        for frame in frames:
            self.transport.send_text(frame)

    # =============================================================================
    # 트랜스포트 이벤트 처리
    # =============================================================================

    def on_socket_open(self) -> None:
        """소켓 연결됨 → CONNECT 프레임 전송 (큐를 거치지 않음)"""
        self.logger.info("🔗 Socket open, sending STOMP CONNECT")
        self._state = ConnectionState.SOCKET_OPEN
        self.transport.send_text(build_connect(self.accept_versions, self.heartbeat))

    def on_text_received(self, raw_text: str) -> None:
        """수신 텍스트 처리"""
        if not raw_text.strip("\r\n"):
            self.logger.debug("💓 Heart-beat received")
            return

        self.logger.debug(f"📩 Received STOMP frame:\n{raw_text}")

        try:
            frame = parse_frame(raw_text)
        except ParseError as e:
            self.logger.warning(f"⚠️ Discarding malformed frame: {e}")
            return

        if frame.command == "CONNECTED":
            self._handle_connected(frame)
        elif frame.command == "MESSAGE":
            self._handle_message(frame)
        elif frame.command == "ERROR":
            self.logger.error(f"❌ STOMP ERROR frame: {frame.headers.get('message', frame.body)}")
        else:
            self.logger.debug(f"Ignoring STOMP frame: {frame.command}")

    def _handle_connected(self, frame: STOMPFrame) -> None:
        if self._state == ConnectionState.READY:
            self.logger.debug("Duplicate CONNECTED frame ignored")
            return
        if self._state != ConnectionState.SOCKET_OPEN:
            self.logger.warning(f"⚠️ CONNECTED frame received in state {self._state.value}, ignoring")
            return

        self._state = ConnectionState.READY
        self.logger.info(f"✅ Connected to STOMP server (version: {frame.headers.get('version', 'unknown')})")
        self._flush_pending_frames()
        self._notify("on_connected")

    def _handle_message(self, frame: STOMPFrame) -> None:
        try:
            response = self.deserializer(frame.body)
        except DeserializationError as e:
            self.logger.error(f"❌ Error decoding message: {e}")
            return

        self.logger.info(f"📦 Gift events received from {frame.headers.get('destination', 'unknown')}")
        self._notify("on_gift_events", response)

    def on_socket_closed(self, reason: str, code: int) -> None:
        """소켓 종료 → DISCONNECTED (자동 재연결 없음)"""
        self.logger.info(f"🔌 Socket closed: {reason!r} (code={code})")
        self._state = ConnectionState.DISCONNECTED
        # 정상 종료(1000)도 종료 사유와 코드를 그대로 전달
        self._notify("on_disconnected", TransportError(reason, code=code))

    def on_transport_error(self, error: Exception) -> None:
        """트랜스포트 오류 → DISCONNECTED (자동 재연결 없음)"""
        self.logger.error(f"❌ Transport error: {error}")
        self._state = ConnectionState.DISCONNECTED
        self._notify("on_disconnected", error)
