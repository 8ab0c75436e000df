"""LLM 요청 생성.

메모리 검사 결과에 따라 (system instruction + 사용자 메시지) 또는
사용자 메시지만 담은 요청을 만듭니다. 실제 네트워크 호출은 하지 않습니다.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from skill_memory_agent.config import SkillMemoryConfig
from skill_memory_agent.memory.inspector import (
    is_first_time_interaction,
    should_send_instruction,
)
from skill_memory_agent.memory.session import SessionTracker
from skill_memory_agent.skills.catalog import SkillCatalog, normalize_skill_name
from skill_memory_agent.skills.language import (
    SKILLS_REQUIRING_PROGRAMMING_LANGUAGE,
    apply_language_context,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkillPromptRequest:
    """LLM 전송 계층에 넘길 요청."""

    model: str
    contents: list[dict[str, Any]]
    system_instruction: dict[str, Any] | None
    generation_config: dict[str, Any]
    used_instruction: bool
    skill_used: str
    programming_language: str | None = None

    @property
    def system_prompt(self) -> str | None:
        if self.system_instruction is None:
            return None
        return "".join(part["text"] for part in self.system_instruction["parts"])

    @property
    def user_message(self) -> str:
        return "".join(
            part["text"] for content in self.contents for part in content["parts"]
        )

    def to_messages(self) -> list[BaseMessage]:
        messages: list[BaseMessage] = []
        if self.system_prompt is not None:
            messages.append(SystemMessage(content=self.system_prompt))
        messages.append(HumanMessage(content=self.user_message))
        return messages

    def to_dict(self) -> dict[str, Any]:
        """전송 계층 형태(`systemInstruction?`, `content`, `languageHint?`)로 변환합니다."""
        payload: dict[str, Any] = {
            "model": self.model,
            "content": self.user_message,
            "contents": self.contents,
            "generationConfig": dict(self.generation_config),
            "isUsingModelMemory": self.used_instruction,
            "skillUsed": self.skill_used,
        }
        if self.system_instruction is not None:
            payload["systemInstruction"] = self.system_instruction
        if self.programming_language:
            payload["languageHint"] = self.programming_language
        return payload


@dataclass(frozen=True)
class RequestComponents:
    """요청을 직접 조립하려는 호출자를 위한 분리된 구성 요소."""

    skill_name: str
    user_message: str
    skill_prompt: str | None
    should_use_model_memory: bool
    is_first_time: bool
    programming_language: str | None = None
    requires_programming_language: bool = False

    @property
    def model_memory(self) -> str | None:
        return self.skill_prompt if self.should_use_model_memory else None

    @property
    def message_content(self) -> str:
        return self.user_message


def resolve_skill_prompt(
    catalog: SkillCatalog,
    skill_name: str | None,
    programming_language: str | None = None,
) -> str | None:
    """정규화된 스킬의 프롬프트를 찾고 필요하면 언어 컨텍스트를 주입합니다."""
    skill_id = normalize_skill_name(skill_name)
    prompt = catalog.get_prompt(skill_id)
    if prompt is None:
        return None
    return apply_language_context(prompt, programming_language, skill_id)


def _user_contents(user_message: str) -> list[dict[str, Any]]:
    return [{"role": "user", "parts": [{"text": user_message}]}]


def build_request(
    catalog: SkillCatalog,
    skill_name: str | None,
    user_message: str,
    memory: Sequence[Any] | None,
    programming_language: str | None = None,
    *,
    tracker: SessionTracker | None = None,
    config: SkillMemoryConfig | None = None,
) -> SkillPromptRequest:
    """메모리 상태에 따라 LLM 요청을 생성합니다.

    지침이 필요하고 프롬프트가 있으면 system instruction을 포함하고
    세션 추적 집합에 스킬을 기록합니다. 프롬프트가 없으면 경고를 남기고
    사용자 메시지만 보냅니다.

    Args:
        catalog: 스킬 카탈로그
        skill_name: 활성 스킬 이름
        user_message: 사용자 메시지
        memory: 현재 메모리 시퀀스
        programming_language: 선택적 프로그래밍 언어
        tracker: 세션 추적 집합 (선택)
        config: 요청 설정 (선택)

    Returns:
        생성된 SkillPromptRequest

    Raises:
        SkillCatalogLoadError: 카탈로그를 로드할 수 없을 때
    """
    config = config or SkillMemoryConfig()
    skill_id = normalize_skill_name(skill_name)
    skill_prompt = resolve_skill_prompt(catalog, skill_id, programming_language)

    system_instruction = None
    if should_send_instruction(skill_id, memory):
        if skill_prompt is not None:
            system_instruction = {"parts": [{"text": skill_prompt}]}
            if tracker is not None:
                tracker.mark_dispatched(skill_id)
            logger.debug("'%s' 스킬 지침을 system instruction으로 전송", skill_id)
        else:
            logger.warning("'%s' 스킬의 시스템 프롬프트를 찾을 수 없음", skill_id)

    return SkillPromptRequest(
        model=config.model,
        contents=_user_contents(user_message),
        system_instruction=system_instruction,
        generation_config=config.generation_config,
        used_instruction=system_instruction is not None,
        skill_used=skill_id,
        programming_language=programming_language,
    )


def get_request_components(
    catalog: SkillCatalog,
    skill_name: str | None,
    user_message: str,
    memory: Sequence[Any] | None,
    programming_language: str | None = None,
) -> RequestComponents:
    """세션 추적 집합을 갱신하지 않고 요청 구성 요소만 계산합니다."""
    skill_id = normalize_skill_name(skill_name)
    return RequestComponents(
        skill_name=skill_id,
        user_message=user_message,
        skill_prompt=resolve_skill_prompt(catalog, skill_id, programming_language),
        should_use_model_memory=should_send_instruction(skill_id, memory),
        is_first_time=is_first_time_interaction(memory),
        programming_language=programming_language,
        requires_programming_language=skill_id in SKILLS_REQUIRING_PROGRAMMING_LANGUAGE,
    )
