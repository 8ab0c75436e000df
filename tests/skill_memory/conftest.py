from pathlib import Path

import pytest

from skill_memory_agent.skills.catalog import SkillCatalog
from skill_memory_agent.skills.load import MappingPromptSource

DSA_PROMPT = "You are a DSA assistant."
BEHAVIORAL_PROMPT = "You are a behavioral interview coach."


def _write_skill(skills_dir: Path, name: str, body: str, description: str = "desc") -> Path:
    skill_dir = skills_dir / name
    skill_dir.mkdir(parents=True, exist_ok=True)
    skill_md = skill_dir / "SKILL.md"
    skill_md.write_text(
        f"---\nname: {name}\ndescription: {description}\n---\n\n{body}\n",
        encoding="utf-8",
    )
    return skill_md


@pytest.fixture
def catalog() -> SkillCatalog:
    return SkillCatalog(
        MappingPromptSource({"dsa": DSA_PROMPT, "behavioral": BEHAVIORAL_PROMPT})
    )


@pytest.fixture
def prompts_dir(tmp_path: Path) -> Path:
    skills_dir = tmp_path / "prompts"
    _write_skill(skills_dir, "dsa", DSA_PROMPT)
    _write_skill(skills_dir, "behavioral", BEHAVIORAL_PROMPT)
    return skills_dir


@pytest.fixture
def write_skill():
    return _write_skill
