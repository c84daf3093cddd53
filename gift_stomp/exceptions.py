"""
Exceptions for Gift STOMP Client
"""
from typing import Optional


class GiftStompError(Exception):
    """
    클라이언트 예외 기본 클래스
    """
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ParseError(GiftStompError):
    """
    STOMP 프레임 파싱 오류
    """


class MalformedFrameError(ParseError):
    """
    헤더/바디 경계(빈 줄)가 없는 프레임
    """


class DeserializationError(GiftStompError):
    """
    메시지 바디를 GiftEventResponse로 변환할 수 없음
    """


class TransportError(GiftStompError):
    """
    소켓 레벨 오류 (연결 실패, 비정상 종료)
    """
    def __init__(self, message: str, code: Optional[int] = None):
        self.code = code
        super().__init__(message)

    def __str__(self) -> str:
        if self.code is None:
            return self.message
        return f"{self.message} (code={self.code})"
