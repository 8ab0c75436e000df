"""스킬 프롬프트 메모리를 에이전트 실행에 통합하는 미들웨어.

에이전트 상태에 메모리 시퀀스(`skill_memory`)와 활성 스킬을 보관합니다.
모델 호출 전에 메모리 검사 결과에 따라 스킬 지침을 `SystemMessage`로
대화 기록에 삽입하고, 모델 응답 후에는 메모리 엔트리를 추가합니다.

지침은 해당 턴의 사용자 메시지 바로 앞에 놓이며 이후 턴에서도 대화 기록에
남아 있으므로, 메모리의 "전송됨" 표시는 곧 "컨텍스트에 존재함"을 뜻합니다.

```python
agent = create_agent(
    model=model,
    middleware=[SkillMemoryMiddleware(protocol)],
    checkpointer=InMemorySaver(),
)
agent.invoke(
    {
        "messages": [{"role": "user", "content": "Two Sum ..."}],
        "active_skill": "dsa",
        "programming_language": "python",
    },
    {"configurable": {"thread_id": "session-1"}},
)
```
"""

import logging
from collections.abc import Sequence
from typing import Any, NotRequired, TypedDict

from langchain.agents.middleware.types import AgentMiddleware, AgentState
from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    RemoveMessage,
    SystemMessage,
)
from langgraph.graph.message import REMOVE_ALL_MESSAGES
from langgraph.runtime import Runtime

from skill_memory_agent.memory.entry import MemoryEntry
from skill_memory_agent.protocol import SkillMemoryProtocol
from skill_memory_agent.skills.catalog import normalize_skill_name

logger = logging.getLogger(__name__)

SKILL_INSTRUCTION_KEY = "skill_instruction"
"""삽입된 지침 메시지의 `additional_kwargs`에 스킬 식별자를 담는 키."""


class SkillMemoryState(AgentState):
    """스킬 메모리 미들웨어용 상태."""

    skill_memory: NotRequired[list[MemoryEntry]]
    """완료된 턴의 메모리 시퀀스."""

    active_skill: NotRequired[str]
    """현재 턴의 스킬 이름 (별칭 허용)."""

    programming_language: NotRequired[str | None]


class SkillMemoryStateUpdate(TypedDict):
    skill_memory: list[MemoryEntry]


def _message_text(message: BaseMessage) -> str:
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(str(block.get("text", "")))
    return "".join(parts)


def _last_human_index(messages: Sequence[BaseMessage]) -> int | None:
    for index in range(len(messages) - 1, -1, -1):
        if isinstance(messages[index], HumanMessage):
            return index
    return None


def _instruction_precedes(
    messages: Sequence[BaseMessage], human_index: int, skill_id: str
) -> bool:
    """사용자 메시지 바로 앞에 같은 스킬의 지침 메시지가 있는지 확인합니다."""
    if human_index == 0:
        return False
    previous = messages[human_index - 1]
    return (
        isinstance(previous, SystemMessage)
        and previous.additional_kwargs.get(SKILL_INSTRUCTION_KEY) == skill_id
    )


class SkillMemoryMiddleware(AgentMiddleware):
    """메모리 검사 결과에 따라 스킬 지침을 대화 기록에 삽입하는 미들웨어.

    Args:
        protocol: 스킬 메모리 프로토콜.
    """

    state_schema = SkillMemoryState

    def __init__(self, protocol: SkillMemoryProtocol) -> None:
        self.protocol = protocol

    def _instruction_update(self, state: SkillMemoryState) -> dict[str, Any] | None:
        messages: list[Any] = list(state.get("messages", []))
        human_index = _last_human_index(messages)
        if human_index is None:
            return None

        skill_id = normalize_skill_name(state.get("active_skill"))
        # 도구 호출 루프의 후속 모델 호출
        if _instruction_precedes(messages, human_index, skill_id):
            return None

        skill_request = self.protocol.build_request(
            skill_id,
            _message_text(messages[human_index]),
            state.get("skill_memory", []),
            state.get("programming_language"),
        )
        if skill_request.system_prompt is None:
            return None

        instruction = SystemMessage(
            content=skill_request.system_prompt,
            additional_kwargs={SKILL_INSTRUCTION_KEY: skill_id},
        )
        logger.debug("'%s' 스킬 지침을 대화 기록에 삽입", skill_id)
        return {
            "messages": [
                RemoveMessage(id=REMOVE_ALL_MESSAGES),
                *messages[:human_index],
                instruction,
                *messages[human_index:],
            ]
        }

    def before_model(
        self, state: SkillMemoryState, runtime: Runtime
    ) -> dict[str, Any] | None:
        return self._instruction_update(state)

    async def abefore_model(
        self, state: SkillMemoryState, runtime: Runtime
    ) -> dict[str, Any] | None:
        return self._instruction_update(state)

    def after_model(
        self, state: SkillMemoryState, runtime: Runtime
    ) -> SkillMemoryStateUpdate | None:
        """모델 응답이 최종 답변이면 메모리 엔트리를 추가합니다.

        지침 전송 여부는 이번 턴의 사용자 메시지 바로 앞에 지침 메시지가
        실제로 있는지로 판단합니다. 도구 호출 중간 응답은 기록하지 않습니다.

        Args:
            state: 현재 에이전트 상태.
            runtime: 런타임 컨텍스트.

        Returns:
            skill_memory가 갱신된 상태, 기록할 턴이 없으면 None.
        """
        messages: list[Any] = state.get("messages", [])
        if not messages or not isinstance(messages[-1], AIMessage):
            return None
        ai_message = messages[-1]
        if ai_message.tool_calls:
            return None

        human_index = _last_human_index(messages)
        if human_index is None:
            return None

        skill_name = state.get("active_skill")
        language = state.get("programming_language")
        updated = self.protocol.update_memory(
            state.get("skill_memory", []),
            skill_name,
            _instruction_precedes(
                messages, human_index, normalize_skill_name(skill_name)
            ),
            _message_text(messages[human_index]),
            _message_text(ai_message),
            language,
        )
        return SkillMemoryStateUpdate(skill_memory=updated)
