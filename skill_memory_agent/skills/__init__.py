"""스킬 카탈로그와 프로그래밍 언어 주입.

공개 API:
- Skill: 정규 스킬 식별자 열거형
- normalize_skill_name: 별칭을 정규 식별자로 변환
- SkillCatalog: 한 번만 로드되는 프롬프트 카탈로그
- inject_programming_language: 언어별 지침 블록 주입
"""

from skill_memory_agent.skills.catalog import (
    BUNDLED_PROMPTS_DIR,
    DEFAULT_SKILL,
    SKILL_ALIASES,
    Skill,
    SkillCatalog,
    default_catalog,
    normalize_skill_name,
)
from skill_memory_agent.skills.language import (
    KNOWN_LANGUAGES,
    SKILLS_REQUIRING_PROGRAMMING_LANGUAGE,
    LanguageSpec,
    apply_language_context,
    inject_programming_language,
    requires_programming_language,
    resolve_language,
)
from skill_memory_agent.skills.load import (
    DirectoryPromptSource,
    MappingPromptSource,
    PromptSource,
    SkillCatalogLoadError,
    SkillPrompt,
)

__all__ = [
    "BUNDLED_PROMPTS_DIR",
    "DEFAULT_SKILL",
    "SKILL_ALIASES",
    "Skill",
    "SkillCatalog",
    "default_catalog",
    "normalize_skill_name",
    "KNOWN_LANGUAGES",
    "SKILLS_REQUIRING_PROGRAMMING_LANGUAGE",
    "LanguageSpec",
    "apply_language_context",
    "inject_programming_language",
    "requires_programming_language",
    "resolve_language",
    "DirectoryPromptSource",
    "MappingPromptSource",
    "PromptSource",
    "SkillCatalogLoadError",
    "SkillPrompt",
]
