"""
Data models for Gift STOMP Client
"""
from typing import Dict, List, Optional, Union
from pydantic import BaseModel, Field
from enum import Enum


class ConnectionState(str, Enum):
    """연결 상태"""
    DISCONNECTED = "disconnected"
    SOCKET_OPEN = "socket_open"
    READY = "ready"


class STOMPFrame(BaseModel):
    """STOMP 프레임 모델"""
    command: str
    headers: Dict[str, str] = {}
    body: str = ""


# =============================================================================
# 요청 페이로드
# =============================================================================

class GiftEventRequest(BaseModel):
    """선물 이벤트 조회 요청"""
    member_uuid: str = Field(..., alias="memberUuid", description="회원 UUID")
    longitude: str = Field(..., description="경도")
    latitude: str = Field(..., description="위도")
    category: str = Field("ALL", description="선물 카테고리")
    start_date: str = Field(..., alias="startDate", description="검색 시작일")
    end_date: str = Field(..., alias="endDate", description="검색 종료일")

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "memberUuid": "hvbkkuDrJDZFP23ZSaguk8rbQBF3",
                "longitude": "0.0",
                "latitude": "0.0",
                "category": "ALL",
                "startDate": "",
                "endDate": ""
            }
        }
    }


# =============================================================================
# 응답 페이로드
# =============================================================================

class GiftStatus(str, Enum):
    """선물 상태"""
    PLAY = "PLAY"
    READY = "READY"
    OPEN = "OPEN"


class GiftItem(BaseModel):
    """선물 공통 속성 (위치/기간 조건 없음)"""
    gift_name: str = Field(..., alias="giftName")
    activate: bool
    insert_date: str = Field(..., alias="insertDate")
    gift_key: int = Field(..., alias="giftKey")
    status: GiftStatus

    model_config = {"populate_by_name": True}


class PeriodGift(GiftItem):
    """기간 조건만 있는 선물"""
    # 서버가 정의되지 않은 상태 문자열을 보낼 수 있음
    status: Union[GiftStatus, str] = Field(..., union_mode="left_to_right")
    start_date: str = Field(..., alias="startDate")
    end_date: str = Field(..., alias="endDate")


class LocationGift(GiftItem):
    """위치 조건만 있는 선물"""
    status: Union[GiftStatus, str] = Field(..., union_mode="left_to_right")
    latitude: float
    longitude: float


class LocationPeriodGift(LocationGift):
    """위치와 기간 조건이 모두 있는 선물"""
    status: GiftStatus
    start_date: str = Field(..., alias="startDate")
    end_date: str = Field(..., alias="endDate")


class GiftData(BaseModel):
    """조건 형태별 선물 목록"""
    no: Optional[List[GiftItem]] = None
    per_only: Optional[List[PeriodGift]] = Field(None, alias="perOnly")
    loc_only: Optional[List[LocationGift]] = Field(None, alias="locOnly")
    both: Optional[List[LocationPeriodGift]] = None

    model_config = {"populate_by_name": True}


class GiftType(BaseModel):
    """선물 종류별 분류"""
    basket: Optional[GiftData] = Field(None, alias="Basket")
    default: Optional[GiftData] = Field(None, alias="Default")
    treasure: Optional[GiftData] = Field(None, alias="Treasure")
    video: Optional[GiftData] = Field(None, alias="Video")

    model_config = {"populate_by_name": True}


class GiftCategory(BaseModel):
    """주고받은 방향별 분류"""
    receive: Optional[GiftType] = Field(None, alias="RECEIVE")
    send: Optional[GiftType] = Field(None, alias="SEND")

    model_config = {"populate_by_name": True}


class GiftEventResponse(BaseModel):
    """선물 이벤트 응답"""
    gift_category: GiftCategory = Field(..., alias="giftCategory")

    model_config = {"populate_by_name": True}
