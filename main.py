"""
Gift STOMP Client
메인 엔트리포인트
"""
import asyncio
import argparse
import logging
from typing import Optional

from gift_stomp.config import config
from gift_stomp.gift_service import GiftEventService
from gift_stomp.interfaces import StompSessionObserver
from gift_stomp.models import GiftEventResponse


class ConsoleGiftObserver(StompSessionObserver):
    """연결되면 구독하고, 잠시 후 선물 이벤트를 요청하는 콘솔 옵저버"""

    def __init__(self, args: argparse.Namespace):
        self.args = args
        self.service: Optional[GiftEventService] = None
        self.stopped = asyncio.Event()

    def on_connected(self) -> None:
        print("✅ WebSocket Connected")

        # 연결 성공 후 구독 및 이벤트 요청
        self.service.subscribe_to_gift_events(self.args.member_uuid)
        asyncio.get_running_loop().call_later(self.args.request_delay, self._send_request)

    def _send_request(self) -> None:
        self.service.send_gift_event_request(
            member_uuid=self.args.member_uuid,
            longitude=self.args.longitude,
            latitude=self.args.latitude,
            category=self.args.category,
            start_date=self.args.start_date,
            end_date=self.args.end_date
        )

    def on_gift_events(self, response: GiftEventResponse) -> None:
        print(f"\n{'='*60}")
        print("🎁 Gift Events Received")
        print(f"{'='*60}")
        print(response.model_dump_json(by_alias=True, exclude_none=True, indent=2))
        print(f"{'='*60}\n")

    def on_disconnected(self, error: Optional[Exception] = None) -> None:
        if error:
            print(f"🔌 WebSocket Disconnected with error: {error}")
        else:
            print("🔌 WebSocket Disconnected")
        self.stopped.set()


async def run_client(args: argparse.Namespace) -> None:
    """클라이언트 실행"""
    observer = ConsoleGiftObserver(args)
    service = GiftEventService.create(observer, url=args.url)
    observer.service = service

    service.connect()
    try:
        if args.duration:
            await asyncio.wait_for(observer.stopped.wait(), timeout=args.duration)
        else:
            await observer.stopped.wait()
    except asyncio.TimeoutError:
        print(f"⏰ Run duration of {args.duration}s elapsed")
    finally:
        print("\n🛑 Stopping client...")
        service.disconnect()
        # 종료 프레임이 나갈 시간을 준다
        await asyncio.sleep(0.1)


def main():
    """메인 함수"""
    parser = argparse.ArgumentParser(description="Gift STOMP Client")
    parser.add_argument("--url", type=str, default=config.websocket_url,
                      help="STOMP WebSocket endpoint")
    parser.add_argument("--member-uuid", type=str, required=True,
                      help="Member UUID whose gift events are requested")
    parser.add_argument("--longitude", type=str, default="0.0")
    parser.add_argument("--latitude", type=str, default="0.0")
    parser.add_argument("--category", type=str, default=config.default_category)
    parser.add_argument("--start-date", type=str, default="")
    parser.add_argument("--end-date", type=str, default="")
    parser.add_argument("--request-delay", type=float, default=3.0,
                      help="Seconds to wait after connecting before sending the request")
    parser.add_argument("--duration", type=float, default=None,
                      help="Stop after this many seconds (runs until disconnected by default)")

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format=config.log_format
    )

    print("🚀 Gift STOMP Client")
    print(f"📊 Endpoint: {args.url}")

    try:
        asyncio.run(run_client(args))
    except KeyboardInterrupt:
        print("\n🛑 Client interrupted by user")


if __name__ == "__main__":
    main()
