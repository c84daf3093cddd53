"""
STOMP frame codec
STOMP 프레임 직렬화/파싱 (상태 없음, I/O 없음)
"""
import re
from typing import Dict, Optional

from .config import config
from .exceptions import MalformedFrameError
from .models import STOMPFrame


NULL = "\x00"
EOL = "\n"

# 헤더와 바디 사이 빈 줄 (CRLF 허용)
_HEADER_BODY_BOUNDARY = re.compile(r"\r?\n\r?\n")


def encode_frame(frame: STOMPFrame) -> str:
    """STOMP 프레임 생성"""
    lines = [frame.command]
    for key, value in frame.headers.items():
        lines.append(f"{key}:{value}")

    # 헤더와 바디 사이 빈 줄, null byte로 종료
    return EOL.join(lines) + EOL + EOL + frame.body + NULL


def build_connect(accept_versions: Optional[str] = None, heartbeat: Optional[str] = None) -> str:
    """CONNECT 프레임 생성"""
    headers = {
        "accept-version": accept_versions or config.accept_versions,
        "heart-beat": heartbeat or config.heartbeat,
    }
    return encode_frame(STOMPFrame(command="CONNECT", headers=headers))


def build_subscribe(subscription_id: str, destination: str) -> str:
    """SUBSCRIBE 프레임 생성"""
    headers = {
        "id": subscription_id,
        "destination": destination,
    }
    return encode_frame(STOMPFrame(command="SUBSCRIBE", headers=headers))


def build_send(destination: str, body_text: str) -> str:
    """SEND 프레임 생성

    content-length는 전송 인코딩(UTF-8) 기준 바이트 길이
    """
    headers = {
        "destination": destination,
        "content-length": str(len(body_text.encode("utf-8"))),
    }
    return encode_frame(STOMPFrame(command="SEND", headers=headers, body=body_text))


def build_disconnect() -> str:
    """DISCONNECT 프레임 생성"""
    return encode_frame(STOMPFrame(command="DISCONNECT"))


def parse_frame(raw_text: str) -> STOMPFrame:
    """STOMP 프레임 파싱

    첫 번째 빈 줄을 기준으로 헤더 블록과 바디를 나눈다.
    명령어 분류는 호출자의 몫이므로 알 수 없는 명령어도 그대로 반환한다.

    Raises:
        MalformedFrameError: 빈 줄 경계가 없거나 명령어가 비어 있는 경우
    """
    # 명령어 앞의 EOL은 heart-beat
    text = raw_text.lstrip("\r\n")

    boundary = _HEADER_BODY_BOUNDARY.search(text)
    if boundary is None:
        raise MalformedFrameError("Missing blank line between headers and body")

    header_lines = [line.rstrip("\r") for line in text[:boundary.start()].split(EOL)]
    command = header_lines[0].strip() if header_lines else ""
    if not command:
        raise MalformedFrameError("Missing STOMP command")

    headers: Dict[str, str] = {}
    for line in header_lines[1:]:
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        # 중복 헤더는 첫 번째 값 우선
        headers.setdefault(key, value)

    body = text[boundary.end():]
    terminated = body.rstrip("\r\n")
    if terminated.endswith(NULL):
        body = terminated[:-1]  # null 문자 제거

    return STOMPFrame(command=command, headers=headers, body=body)
