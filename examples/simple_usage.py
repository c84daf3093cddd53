"""
Simple usage example for Gift STOMP Client
간단한 사용 예시
"""
import asyncio
import sys
import os
from typing import Optional

# Add parent directory to path for imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gift_stomp.gift_service import GiftEventService
from gift_stomp.interfaces import StompSessionObserver
from gift_stomp.models import GiftEventResponse


MEMBER_UUID = "hvbkkuDrJDZFP23ZSaguk8rbQBF3"


class MyGiftObserver(StompSessionObserver):
    """사용자 정의 선물 이벤트 처리기"""

    def on_connected(self) -> None:
        print("✅ Connected")

    def on_disconnected(self, error: Optional[Exception] = None) -> None:
        print(f"🔌 Disconnected: {error}")

    def on_gift_events(self, response: GiftEventResponse) -> None:
        received = response.gift_category.receive
        if received and received.basket and received.basket.both:
            for gift in received.basket.both:
                print(f"   🎁 {gift.gift_name} @ ({gift.latitude}, {gift.longitude}) - {gift.status.value}")
        else:
            print(f"   Data: {response}")


async def main():
    """메인 실행 함수"""
    print("🚀 Starting Simple Gift STOMP Example")
    print("=" * 50)

    observer = MyGiftObserver()
    service = GiftEventService.create(observer)

    # 연결 전에 요청해도 CONNECTED 이후 순서대로 전송된다
    service.subscribe_to_gift_events(MEMBER_UUID)
    service.send_gift_event_request(
        member_uuid=MEMBER_UUID,
        longitude="127.0276",
        latitude="37.4979",
        start_date="",
        end_date=""
    )

    service.connect()
    try:
        await asyncio.sleep(30)
    finally:
        service.disconnect()
        await asyncio.sleep(0.1)
        print("✅ Example finished")


if __name__ == "__main__":
    asyncio.run(main())
