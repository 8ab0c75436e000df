"""SKILL.md 파일에서 스킬 프롬프트 본문을 파싱하고 로드하는 프롬프트 소스.

각 스킬은 다음을 포함하는 SKILL.md 파일이 있는 디렉토리입니다:
- YAML 프론트매터 (name, description 필수)
- 모델에게 system instruction으로 전달될 마크다운 본문

```
prompts/
├── dsa/
│   └── SKILL.md
└── behavioral/
    └── SKILL.md
```

디렉토리 자체를 읽을 수 없으면 카탈로그 초기화 실패로 취급하고,
개별 SKILL.md가 잘못된 경우(이름이 디렉토리와 다른 경우 포함)에는 경고를
남기고 건너뜁니다. 별칭 이름(예: `algorithms`)은 카탈로그가 정규 식별자로
바꿉니다.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import yaml

logger = logging.getLogger(__name__)

MAX_SKILL_FILE_SIZE = 10 * 1024 * 1024  # 10MB - DoS 방지
MAX_SKILL_NAME_LENGTH = 64

SKILL_FILE_NAME = "SKILL.md"

_FRONTMATTER_PATTERN = re.compile(r"^---\s*\n(.*?)\n---\s*\n?(.*)$", re.DOTALL)
_SKILL_NAME_PATTERN = re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)*")


class SkillCatalogLoadError(RuntimeError):
    """프롬프트 소스를 읽을 수 없어 카탈로그를 초기화하지 못했을 때 발생합니다."""


@dataclass(frozen=True)
class SkillPrompt:
    """정규 스킬 식별자에 연결된 불변 프롬프트 텍스트."""

    skill: str
    text: str
    description: str = ""
    path: str | None = None


class PromptSource(Protocol):
    """정규 스킬 식별자별 프롬프트 텍스트를 공급하는 외부 협력자."""

    def load_prompts(self) -> dict[str, SkillPrompt]: ...


def _resolves_within(path: Path, base_dir: Path) -> bool:
    """심볼릭 링크를 따라간 실제 경로가 base_dir 안에 있을 때만 True."""
    try:
        return path.resolve().is_relative_to(base_dir)
    except (OSError, RuntimeError):
        return False


def _skill_name_problem(name: str, directory_name: str) -> str | None:
    """스킬 이름이 로드 규칙을 어기면 그 이유를, 아니면 None을 반환합니다."""
    if len(name) > MAX_SKILL_NAME_LENGTH:
        return f"이름이 {MAX_SKILL_NAME_LENGTH}자를 초과함"
    if not _SKILL_NAME_PATTERN.fullmatch(name):
        return "소문자 영숫자와 단일 하이픈만 허용됨"
    if name != directory_name:
        return f"디렉토리 이름 '{directory_name}'과 다름"
    return None


def parse_skill_prompt(skill_md_path: Path) -> SkillPrompt | None:
    """SKILL.md 파일에서 프론트매터와 프롬프트 본문을 파싱합니다.

    Args:
        skill_md_path: SKILL.md 파일 경로

    Returns:
        파싱된 SkillPrompt, 파일이 유효하지 않으면 None
    """
    try:
        file_size = skill_md_path.stat().st_size
        if file_size > MAX_SKILL_FILE_SIZE:
            logger.warning(
                "%s 건너뜀: 파일이 너무 큼 (%d 바이트)", skill_md_path, file_size
            )
            return None

        content = skill_md_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("%s 읽기 오류: %s", skill_md_path, e)
        return None

    match = _FRONTMATTER_PATTERN.match(content)
    if not match:
        logger.warning("%s 건너뜀: 유효한 YAML 프론트매터를 찾을 수 없음", skill_md_path)
        return None

    frontmatter_str, body = match.group(1), match.group(2)

    try:
        frontmatter_data = yaml.safe_load(frontmatter_str)
    except yaml.YAMLError as e:
        logger.warning("%s의 YAML이 유효하지 않음: %s", skill_md_path, e)
        return None

    if not isinstance(frontmatter_data, dict):
        logger.warning("%s 건너뜀: 프론트매터가 매핑이 아님", skill_md_path)
        return None

    name = frontmatter_data.get("name")
    description = frontmatter_data.get("description")
    if not name or not description:
        logger.warning("%s 건너뜀: 필수 'name' 또는 'description' 누락", skill_md_path)
        return None

    text = body.strip()
    if not text:
        logger.warning("%s 건너뜀: 프롬프트 본문이 비어 있음", skill_md_path)
        return None

    skill = str(name).strip().lower()
    problem = _skill_name_problem(skill, skill_md_path.parent.name)
    if problem is not None:
        logger.warning("%s 건너뜀: 스킬 이름 '%s' 오류 (%s)", skill_md_path, skill, problem)
        return None

    return SkillPrompt(
        skill=skill,
        text=text,
        description=str(description),
        path=str(skill_md_path),
    )


class DirectoryPromptSource:
    """`<skills_dir>/<skill>/SKILL.md` 레이아웃에서 프롬프트를 읽는 소스.

    Args:
        skills_dir: 스킬 디렉토리 경로
        allowed_skills: 지정되면 프론트매터 name이 이 값들인 스킬만 로드합니다.
    """

    def __init__(
        self,
        skills_dir: str | Path,
        allowed_skills: Iterable[str] | None = None,
    ) -> None:
        self.skills_dir = Path(skills_dir).expanduser()
        self.allowed_skills = (
            frozenset(s.lower() for s in allowed_skills)
            if allowed_skills is not None
            else None
        )

    def load_prompts(self) -> dict[str, SkillPrompt]:
        if not self.skills_dir.is_dir():
            raise SkillCatalogLoadError(
                f"스킬 프롬프트 디렉토리를 찾을 수 없음: {self.skills_dir}"
            )

        try:
            resolved_base = self.skills_dir.resolve()
            skill_dirs = sorted(self.skills_dir.iterdir())
        except (OSError, RuntimeError) as e:
            raise SkillCatalogLoadError(
                f"스킬 프롬프트 디렉토리를 읽을 수 없음: {self.skills_dir}: {e}"
            ) from e

        prompts: dict[str, SkillPrompt] = {}

        for skill_dir in skill_dirs:
            # 보안: 스킬 디렉토리 외부를 가리키는 심볼릭 링크 포착
            if not _resolves_within(skill_dir, resolved_base) or not skill_dir.is_dir():
                continue

            skill_md_path = skill_dir / SKILL_FILE_NAME
            if not skill_md_path.exists():
                continue
            if not _resolves_within(skill_md_path, resolved_base):
                continue

            prompt = parse_skill_prompt(skill_md_path)
            if prompt is None:
                continue
            if self.allowed_skills is not None and prompt.skill not in self.allowed_skills:
                continue

            prompts[prompt.skill] = prompt

        return prompts


class MappingPromptSource:
    """메모리 상의 `{skill: text}` 매핑으로부터 프롬프트를 공급합니다."""

    def __init__(self, prompts: Mapping[str, str]) -> None:
        self._prompts = dict(prompts)

    def load_prompts(self) -> dict[str, SkillPrompt]:
        return {
            skill.lower(): SkillPrompt(skill=skill.lower(), text=text)
            for skill, text in self._prompts.items()
        }
