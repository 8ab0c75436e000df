"""스킬 카탈로그와 스킬 이름 정규화.

별칭 문자열을 정규 스킬 식별자로 바꾸고, 정규 식별자별 프롬프트 텍스트를
보관합니다. 카탈로그는 명시적으로 생성되어 협력 객체에 주입되며,
첫 사용 시 한 번만 로드된 뒤에는 읽기 전용으로 취급됩니다.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from dataclasses import replace
from enum import Enum
from pathlib import Path
from types import MappingProxyType

from skill_memory_agent.skills.load import (
    DirectoryPromptSource,
    PromptSource,
    SkillCatalogLoadError,
    SkillPrompt,
)

logger = logging.getLogger(__name__)

BUNDLED_PROMPTS_DIR = Path(__file__).resolve().parent / "prompts"


class Skill(str, Enum):
    """정규 스킬 식별자."""

    GENERAL = "general"
    DSA = "dsa"
    BEHAVIORAL = "behavioral"
    SALES = "sales"
    PRESENTATION = "presentation"
    DATA_SCIENCE = "data-science"
    PROGRAMMING = "programming"
    DEVOPS = "devops"
    SYSTEM_DESIGN = "system-design"
    NEGOTIATION = "negotiation"

    @classmethod
    def from_id(cls, skill_id: str | None) -> Skill | None:
        """정규 식별자에 해당하는 멤버를 반환합니다. 열린 식별자는 None."""
        try:
            return cls(skill_id)
        except ValueError:
            return None


DEFAULT_SKILL = Skill.GENERAL

SKILL_ALIASES: Mapping[str, Skill] = MappingProxyType(
    {
        "dsa": Skill.DSA,
        "data-structures": Skill.DSA,
        "algorithms": Skill.DSA,
        "data-structures-algorithms": Skill.DSA,
        "behavioral": Skill.BEHAVIORAL,
        "behavioral-interview": Skill.BEHAVIORAL,
        "behavior": Skill.BEHAVIORAL,
        "sales": Skill.SALES,
        "selling": Skill.SALES,
        "business-development": Skill.SALES,
        "presentation": Skill.PRESENTATION,
        "presentations": Skill.PRESENTATION,
        "public-speaking": Skill.PRESENTATION,
        "data-science": Skill.DATA_SCIENCE,
        "datascience": Skill.DATA_SCIENCE,
        "machine-learning": Skill.DATA_SCIENCE,
        "ml": Skill.DATA_SCIENCE,
        "programming": Skill.PROGRAMMING,
        "coding": Skill.PROGRAMMING,
        "software-development": Skill.PROGRAMMING,
        "development": Skill.PROGRAMMING,
        "devops": Skill.DEVOPS,
        "dev-ops": Skill.DEVOPS,
        "infrastructure": Skill.DEVOPS,
        "system-design": Skill.SYSTEM_DESIGN,
        "systems-design": Skill.SYSTEM_DESIGN,
        "architecture": Skill.SYSTEM_DESIGN,
        "distributed-systems": Skill.SYSTEM_DESIGN,
        "negotiation": Skill.NEGOTIATION,
        "negotiating": Skill.NEGOTIATION,
        "conflict-resolution": Skill.NEGOTIATION,
    }
)


def normalize_skill_name(skill_name: str | None) -> str:
    """원시 스킬 이름을 정규 식별자로 변환합니다.

    대소문자를 구분하지 않고 앞뒤 공백을 제거합니다. 비어 있으면
    기본 식별자(`general`)를, 알 수 없는 이름은 그대로(소문자) 반환합니다.
    """
    if not skill_name:
        return DEFAULT_SKILL.value

    normalized = skill_name.strip().lower()
    if not normalized:
        return DEFAULT_SKILL.value

    skill = SKILL_ALIASES.get(normalized)
    return skill.value if skill is not None else normalized


def _canonical_prompts(prompts: Mapping[str, SkillPrompt]) -> dict[str, SkillPrompt]:
    """소스의 키를 정규 식별자로 바꿉니다.

    별칭 키(예: `algorithms`)는 정규 식별자(`dsa`)로 등록됩니다. 여러 키가
    같은 식별자로 겹치면 이미 정규 형태인 키를 우선하고 나머지는 건너뜁니다.
    """
    ordered = sorted(
        prompts, key=lambda key: (normalize_skill_name(key) != key.strip().lower(), key)
    )
    canonical: dict[str, SkillPrompt] = {}
    for key in ordered:
        skill_id = normalize_skill_name(key)
        if skill_id in canonical:
            logger.warning(
                "'%s' 프롬프트 건너뜀: '%s' 스킬 프롬프트가 이미 등록됨", key, skill_id
            )
            continue
        if skill_id != key:
            logger.info("'%s' 프롬프트를 정규 식별자 '%s'로 등록", key, skill_id)
        canonical[skill_id] = replace(prompts[key], skill=skill_id)
    return canonical


class SkillCatalog:
    """정규 스킬 식별자별 프롬프트 카탈로그.

    Args:
        source: 프롬프트 텍스트를 공급하는 PromptSource.
    """

    def __init__(self, source: PromptSource) -> None:
        self._source = source
        self._prompts: Mapping[str, SkillPrompt] = MappingProxyType({})
        self._loaded = False
        self._load_lock = threading.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load(self) -> None:
        """프롬프트 소스를 한 번만 로드합니다.

        Raises:
            SkillCatalogLoadError: 소스를 읽을 수 없을 때
        """
        if self._loaded:
            return

        with self._load_lock:
            if self._loaded:
                return
            try:
                prompts = self._source.load_prompts()
            except SkillCatalogLoadError:
                logger.error("스킬 프롬프트 로드 실패", exc_info=True)
                raise
            except OSError as e:
                logger.error("스킬 프롬프트 로드 실패: %s", e)
                raise SkillCatalogLoadError(f"스킬 프롬프트 로드 실패: {e}") from e

            self._prompts = MappingProxyType(_canonical_prompts(prompts))
            self._loaded = True
            logger.debug("스킬 프롬프트 %d개 로드됨", len(self._prompts))

    def get_prompt(self, skill_id: str) -> str | None:
        """정규 식별자의 프롬프트 텍스트를 반환합니다. 없으면 None."""
        self.load()
        prompt = self._prompts.get(skill_id)
        return prompt.text if prompt is not None else None

    def get(self, skill_id: str) -> SkillPrompt | None:
        self.load()
        return self._prompts.get(skill_id)

    def available_skills(self) -> list[str]:
        self.load()
        return sorted(self._prompts)

    @property
    def prompt_count(self) -> int:
        self.load()
        return len(self._prompts)


def default_catalog(prompts_dir: str | Path | None = None) -> SkillCatalog:
    """번들된 (또는 지정된) 프롬프트 디렉토리 위의 카탈로그를 생성합니다."""
    return SkillCatalog(DirectoryPromptSource(prompts_dir or BUNDLED_PROMPTS_DIR))
