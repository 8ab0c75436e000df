"""메모리 검사기: 다음 요청에 스킬 지침을 포함해야 하는지 결정합니다.

결정은 오직 메모리 시퀀스에서만 도출됩니다. 세션 추적 집합이나
카탈로그 상태는 참조하지 않으므로, 프로세스 재시작 후 복원된 세션에서도
같은 결정이 재현됩니다.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from skill_memory_agent.skills.catalog import normalize_skill_name


def is_first_time_interaction(memory: Sequence[Any] | None) -> bool:
    return not memory


def _is_instruction_entry(entry: Any, skill_id: str) -> bool:
    if not isinstance(entry, Mapping):
        return False
    return (
        entry.get("skill_used") == skill_id
        and entry.get("prompt_sent_as_memory") is True
    )


def should_send_instruction(skill_name: str | None, memory: Sequence[Any] | None) -> bool:
    """스킬의 system instruction을 보내야 하는지 판단합니다.

    1. 메모리가 비어 있으면 (첫 턴) 항상 True
    2. 같은 스킬이면서 지침 전송 플래그가 True인 엔트리가 있으면 False
    3. 그 외에는 True

    최근성이나 직전 스킬 여부는 고려하지 않습니다. 스킬별 지침은
    대화당 정확히 한 번만 전달됩니다. 필드가 없는 엔트리는 불일치로 취급합니다.

    Args:
        skill_name: 스킬 이름 (정규화됨)
        memory: 지금까지의 메모리 시퀀스

    Returns:
        지침을 보내야 하면 True
    """
    if is_first_time_interaction(memory):
        return True

    skill_id = normalize_skill_name(skill_name)
    return not any(_is_instruction_entry(entry, skill_id) for entry in memory)
