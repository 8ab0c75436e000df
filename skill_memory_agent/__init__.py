"""스킬 프롬프트 메모리 프로토콜.

대화형 어시스턴트 클라이언트와 LLM 백엔드 사이에서, 턴마다 스킬의
system instruction을 (다시) 보내야 하는지 아니면 사용자 메시지만
보내면 되는지를 결정합니다.

## 핵심 원칙

1. **스킬별 1회 전달**: 각 스킬의 지침은 대화당 한 번만 전송
   - 스킬을 자주 전환해도 이미 전달된 지침은 다시 보내지 않음
   - 토큰 비용을 스킬 수에 비례하도록 제한
2. **메모리 시퀀스가 근거**: 결정은 메모리 시퀀스만으로 재현 가능
   - 프로세스 재시작 후 복원된 세션에서도 같은 결정
   - 세션 추적 집합은 힌트일 뿐
3. **우아한 성능 저하**: 프롬프트가 없는 스킬, 알 수 없는 언어는 경고 후 진행
   - 카탈로그 로드 실패만 턴을 중단

## 모듈 구조

```
skill_memory_agent/
├── __init__.py          # 이 파일
├── config.py            # SkillMemoryConfig
├── protocol.py          # SkillMemoryProtocol (오케스트레이터 진입점)
├── request_builder.py   # 요청 생성
├── middleware.py        # 에이전트 미들웨어 통합
├── skills/              # 카탈로그, 정규화, 언어 주입
└── memory/              # 메모리 검사, 기록, 세션 추적
```
"""

__version__ = "0.1.0"

from skill_memory_agent.config import SkillMemoryConfig
from skill_memory_agent.memory import (
    MemoryAction,
    MemoryEntry,
    SessionTracker,
    append_memory_entry,
    should_send_instruction,
)
from skill_memory_agent.protocol import (
    SessionStats,
    SkillMemoryProtocol,
    TurnPreparation,
)
from skill_memory_agent.request_builder import (
    RequestComponents,
    SkillPromptRequest,
    build_request,
    get_request_components,
)
from skill_memory_agent.skills import (
    DirectoryPromptSource,
    MappingPromptSource,
    Skill,
    SkillCatalog,
    SkillCatalogLoadError,
    default_catalog,
    inject_programming_language,
    normalize_skill_name,
)

__all__ = [
    "SkillMemoryConfig",
    "MemoryAction",
    "MemoryEntry",
    "SessionTracker",
    "append_memory_entry",
    "should_send_instruction",
    "SessionStats",
    "SkillMemoryProtocol",
    "TurnPreparation",
    "RequestComponents",
    "SkillPromptRequest",
    "build_request",
    "get_request_components",
    "DirectoryPromptSource",
    "MappingPromptSource",
    "Skill",
    "SkillCatalog",
    "SkillCatalogLoadError",
    "default_catalog",
    "inject_programming_language",
    "normalize_skill_name",
]
