"""
WebSocket transport for the STOMP session
websockets 기반 비동기 트랜스포트
"""
import asyncio
import logging
from typing import Optional, Set

import websockets

from .config import config
from .exceptions import TransportError
from .interfaces import StompTransport, TransportListener


STOMP_SUBPROTOCOLS = ["v11.stomp", "v10.stomp"]

# close frame 없이 연결이 끊긴 경우
ABNORMAL_CLOSURE = 1006


class WebSocketTransport(StompTransport):
    """WebSocket 트랜스포트

    실행 중인 asyncio 이벤트 루프 안에서 사용해야 한다. 모든 요청은 즉시
    반환되며 리스너 콜백은 이벤트 루프에서 하나씩 호출된다.
    """

    def __init__(self, url: Optional[str] = None, open_timeout: Optional[float] = None):
        self.url = url or config.websocket_url
        self.open_timeout = open_timeout if open_timeout is not None else config.connection_timeout
        self.websocket = None
        self.listener: Optional[TransportListener] = None

        # 비동기 태스크 관리
        self.connection_task: Optional[asyncio.Task] = None
        self.outbox: Optional[asyncio.Queue] = None
        self._background_tasks: Set[asyncio.Task] = set()

        # open() 호출마다 증가, 이전 연결의 이벤트를 걸러낸다
        self._generation = 0

        self.logger = logging.getLogger("WebSocketTransport")

    def set_listener(self, listener: TransportListener) -> None:
        self.listener = listener

    @property
    def is_open(self) -> bool:
        return self.websocket is not None

    # =============================================================================
    # 연결 관리
    # =============================================================================

    def open(self) -> None:
        """연결 태스크 시작"""
        if self.connection_task and not self.connection_task.done():
            self.logger.warning("⚠️ Connection already in progress")
            return
        self._generation += 1
        self.connection_task = asyncio.get_running_loop().create_task(self._run(self._generation))

    def close(self) -> None:
        """연결 종료 요청 (대기 중인 전송은 유실될 수 있음)

        종료 중인 연결은 즉시 분리되므로 바로 open()을 호출하면 새로 연결한다.
        """
        websocket = self.websocket
        task = self.connection_task
        self.websocket = None
        self.outbox = None
        self.connection_task = None

        if websocket is None:
            # 아직 다이얼 중이면 시도 자체를 취소
            if task and not task.done():
                task.cancel()
            return
        self._spawn(websocket.close())

    async def _run(self, generation: int) -> None:
        self.logger.info(f"📡 Connecting to {self.url}")
        try:
            websocket = await websockets.connect(
                self.url,
                subprotocols=STOMP_SUBPROTOCOLS,
                open_timeout=self.open_timeout
            )
        except (OSError, asyncio.TimeoutError, websockets.exceptions.WebSocketException) as e:
            self.logger.error(f"❌ Connection failed: {e}")
            if generation == self._generation:
                self._emit("on_transport_error", TransportError(f"Connection failed: {e}"))
            return

        outbox: asyncio.Queue = asyncio.Queue()
        writer_task = asyncio.create_task(self._write_loop(websocket, outbox))
        self.websocket = websocket
        self.outbox = outbox
        self.logger.info("✅ WebSocket connected")
        self._emit("on_socket_open")

        error: Optional[TransportError] = None
        try:
            async for message in websocket:
                if self.websocket is not websocket:
                    # close() 이후 도착한 프레임은 버린다
                    continue
                if isinstance(message, bytes):
                    message = message.decode("utf-8", errors="replace")
                self._emit("on_text_received", message)
        except websockets.exceptions.ConnectionClosed:
            pass
        except Exception as e:
            self.logger.error(f"❌ Listen loop error: {e}")
            error = TransportError(f"Listen loop error: {e}")
            self._spawn(websocket.close())
        finally:
            await self._stop_writer(writer_task)
            if self.websocket is websocket:
                self.websocket = None
                self.outbox = None

        if generation != self._generation:
            self.logger.debug("Previous connection finished after reopen, events suppressed")
            return

        if error is not None:
            self._emit("on_transport_error", error)
            return

        code = websocket.close_code if websocket.close_code is not None else ABNORMAL_CLOSURE
        reason = websocket.close_reason or ""
        self._emit("on_socket_closed", reason, code)

    # =============================================================================
    # 전송
    # =============================================================================

    def send_text(self, text: str) -> None:
        """전송 큐에 추가 (fire-and-forget)"""
        if self.outbox is None:
            self.logger.warning("⚠️ WebSocket is not open, dropping outbound frame")
            return
        self.outbox.put_nowait(text)

    async def _write_loop(self, websocket, outbox: asyncio.Queue) -> None:
        """요청 순서대로 프레임 전송"""
        while True:
            text = await outbox.get()
            try:
                await websocket.send(text)
            except websockets.exceptions.ConnectionClosed:
                self.logger.warning("⚠️ Connection closed, outbound frames dropped")
                return
            except Exception as e:
                self.logger.error(f"❌ Send error: {e}")
                return

    async def _stop_writer(self, task: asyncio.Task) -> None:
        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    # =============================================================================
    # 내부 유틸
    # =============================================================================

    def _spawn(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    def _emit(self, callback_name: str, *args) -> None:
        """리스너 콜백 호출"""
        if self.listener is None:
            return
        try:
            getattr(self.listener, callback_name)(*args)
        except Exception as e:
            self.logger.error(f"❌ Listener {callback_name} error: {e}")
