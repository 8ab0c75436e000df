"""스킬 프롬프트 메모리 프로토콜.

상위 오케스트레이터가 사용하는 진입점입니다. 카탈로그와 세션 추적 집합을
주입받아 턴마다 다음을 수행합니다:

1. 스킬 이름 정규화
2. 프롬프트 조회 및 프로그래밍 언어 주입
3. 메모리 검사로 system instruction 전송 여부 결정
4. 요청 생성
5. (외부: LLM 호출) 이후 메모리 엔트리 추가

## 사용 예시

```python
from skill_memory_agent import SkillMemoryProtocol, default_catalog

protocol = SkillMemoryProtocol(default_catalog())
memory = []

turn = protocol.process_user_request("dsa", "Two Sum ...", memory, "python")
answer = call_llm(turn.request.to_messages())  # 외부 전송 계층
memory = protocol.update_memory(
    memory, "dsa", turn.request.used_instruction, "Two Sum ...", answer, "python"
)
```
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from skill_memory_agent.config import SkillMemoryConfig
from skill_memory_agent.memory.entry import MemoryEntry
from skill_memory_agent.memory.inspector import should_send_instruction
from skill_memory_agent.memory.recorder import append_memory_entry
from skill_memory_agent.memory.session import SessionTracker
from skill_memory_agent.request_builder import (
    RequestComponents,
    SkillPromptRequest,
    build_request,
    get_request_components,
    resolve_skill_prompt,
)
from skill_memory_agent.skills.catalog import (
    SkillCatalog,
    default_catalog,
    normalize_skill_name,
)
from skill_memory_agent.skills.language import (
    SKILLS_REQUIRING_PROGRAMMING_LANGUAGE,
    requires_programming_language,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TurnPreparation:
    """한 턴의 요청 준비 결과."""

    request: SkillPromptRequest
    components: RequestComponents
    programming_language: str | None = None
    request_ready: bool = True
    needs_memory_update: bool = True


@dataclass(frozen=True)
class SessionStats:
    """현재 프로세스의 세션 통계."""

    total_prompts: int
    available_skills: list[str]
    skills_used: list[str]
    skills_requiring_programming_language: list[str] = field(
        default_factory=lambda: sorted(SKILLS_REQUIRING_PROGRAMMING_LANGUAGE)
    )

    @property
    def skills_used_in_session(self) -> int:
        return len(self.skills_used)


class SkillMemoryProtocol:
    """스킬 프롬프트 메모리 프로토콜.

    Args:
        catalog: 스킬 프롬프트 카탈로그.
        tracker: 세션 추적 집합. None이면 새로 생성합니다.
        config: 요청/메모리 설정. None이면 기본값 사용.
    """

    def __init__(
        self,
        catalog: SkillCatalog,
        tracker: SessionTracker | None = None,
        config: SkillMemoryConfig | None = None,
    ) -> None:
        self.catalog = catalog
        self.tracker = tracker or SessionTracker()
        self.config = config or SkillMemoryConfig()

    @classmethod
    def from_config(cls, config: SkillMemoryConfig | None = None) -> "SkillMemoryProtocol":
        config = config or SkillMemoryConfig.from_env()
        return cls(default_catalog(config.prompts_dir), config=config)

    def normalize_skill_name(self, skill_name: str | None) -> str:
        return normalize_skill_name(skill_name)

    def get_skill_prompt(
        self, skill_name: str | None, programming_language: str | None = None
    ) -> str | None:
        return resolve_skill_prompt(self.catalog, skill_name, programming_language)

    def should_send_instruction(
        self, skill_name: str | None, memory: Sequence[Any] | None
    ) -> bool:
        return should_send_instruction(skill_name, memory)

    def build_request(
        self,
        skill_name: str | None,
        user_message: str,
        memory: Sequence[Any] | None,
        programming_language: str | None = None,
    ) -> SkillPromptRequest:
        return build_request(
            self.catalog,
            skill_name,
            user_message,
            memory,
            programming_language,
            tracker=self.tracker,
            config=self.config,
        )

    def get_request_components(
        self,
        skill_name: str | None,
        user_message: str,
        memory: Sequence[Any] | None,
        programming_language: str | None = None,
    ) -> RequestComponents:
        return get_request_components(
            self.catalog, skill_name, user_message, memory, programming_language
        )

    def process_user_request(
        self,
        skill_name: str | None,
        user_message: str,
        memory: Sequence[Any] | None,
        programming_language: str | None = None,
    ) -> TurnPreparation:
        """한 턴에 필요한 요청과 구성 요소를 준비합니다.

        Raises:
            SkillCatalogLoadError: 카탈로그를 로드할 수 없을 때. 턴을 중단시키는
                유일한 오류입니다.
        """
        components = self.get_request_components(
            skill_name, user_message, memory, programming_language
        )
        request = self.build_request(
            skill_name, user_message, memory, programming_language
        )
        return TurnPreparation(
            request=request,
            components=components,
            programming_language=programming_language,
        )

    def update_memory(
        self,
        memory: Sequence[MemoryEntry] | None,
        skill_name: str | None,
        used_instruction: bool,
        user_message: str,
        response: str | None,
        programming_language: str | None = None,
        *,
        now: datetime | None = None,
    ) -> list[MemoryEntry]:
        return append_memory_entry(
            memory,
            skill_name,
            used_instruction,
            user_message,
            response,
            programming_language,
            preview_length=self.config.response_preview_length,
            now=now,
        )

    def requires_programming_language(self, skill_name: str | None) -> bool:
        return requires_programming_language(skill_name)

    def skills_requiring_programming_language(self) -> list[str]:
        return sorted(SKILLS_REQUIRING_PROGRAMMING_LANGUAGE)

    def available_skills(self) -> list[str]:
        return self.catalog.available_skills()

    def reset_session(self) -> None:
        self.tracker.reset()
        logger.debug("세션 추적 집합 초기화")

    def session_stats(self) -> SessionStats:
        return SessionStats(
            total_prompts=self.catalog.prompt_count,
            available_skills=self.catalog.available_skills(),
            skills_used=self.tracker.dispatched_skills,
        )
