"""턴 완료 후 메모리 시퀀스에 엔트리를 추가합니다."""

from collections.abc import Sequence
from datetime import datetime, timezone

from skill_memory_agent.memory.entry import MemoryAction, MemoryEntry
from skill_memory_agent.skills.catalog import normalize_skill_name

DEFAULT_RESPONSE_PREVIEW_LENGTH = 200
PREVIEW_SUFFIX = "..."


def truncate_response(response: str | None, preview_length: int) -> str | None:
    if not response:
        return None
    return response[:preview_length] + PREVIEW_SUFFIX


def append_memory_entry(
    memory: Sequence[MemoryEntry] | None,
    skill_name: str | None,
    used_instruction: bool,
    user_message: str,
    response: str | None,
    programming_language: str | None = None,
    *,
    preview_length: int = DEFAULT_RESPONSE_PREVIEW_LENGTH,
    now: datetime | None = None,
) -> list[MemoryEntry]:
    """엔트리 하나가 추가된 새 메모리 시퀀스를 반환합니다.

    입력 시퀀스는 변경하지 않으므로, 이전 값을 들고 있는 다른 reader에게
    영향을 주지 않습니다.

    Args:
        memory: 현재 메모리 시퀀스
        skill_name: 사용된 스킬
        used_instruction: 이번 턴에 system instruction을 보냈는지 여부
        user_message: 사용자 메시지
        response: 모델 응답 (미리보기로 잘려 저장됨)
        programming_language: 사용된 프로그래밍 언어
        preview_length: 응답 미리보기 최대 길이
        now: 타임스탬프 (기본값: 현재 UTC 시각)

    Returns:
        새 메모리 시퀀스
    """
    timestamp = (now or datetime.now(timezone.utc)).isoformat()
    action = (
        MemoryAction.MODEL_MEMORY_SENT if used_instruction else MemoryAction.REGULAR_MESSAGE
    )

    entry = MemoryEntry(
        timestamp=timestamp,
        skill_used=normalize_skill_name(skill_name),
        prompt_sent_as_memory=bool(used_instruction),
        user_message=user_message,
        ai_response=truncate_response(response, preview_length),
        action=action.value,
        programming_language=programming_language or None,
    )

    return [*(memory or ()), entry]
