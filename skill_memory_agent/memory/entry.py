"""대화 메모리 엔트리 타입.

메모리 시퀀스는 호출자(외부 영속화 계층)가 소유하며, 이 라이브러리는
읽고 복사본에 추가만 합니다. 엔트리는 JSON으로 그대로 저장할 수 있는
TypedDict입니다.
"""

from enum import Enum
from typing import TypedDict


class MemoryAction(str, Enum):
    """턴에서 스킬 지침이 어떻게 전달되었는지."""

    MODEL_MEMORY_SENT = "MODEL_MEMORY_SENT"
    REGULAR_MESSAGE = "REGULAR_MESSAGE"


class MemoryEntry(TypedDict):
    """완료된 턴 하나에 대한 기록."""

    timestamp: str
    """ISO-8601 UTC 타임스탬프."""

    skill_used: str
    """이 턴에 사용된 정규 스킬 식별자."""

    prompt_sent_as_memory: bool
    """이 턴에 스킬 프롬프트가 system instruction으로 전송되었는지 여부."""

    user_message: str

    ai_response: str | None
    """잘린 모델 응답 미리보기."""

    action: str

    programming_language: str | None
