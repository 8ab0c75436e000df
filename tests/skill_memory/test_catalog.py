import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from skill_memory_agent.skills.catalog import (
    BUNDLED_PROMPTS_DIR,
    SKILL_ALIASES,
    Skill,
    SkillCatalog,
    default_catalog,
    normalize_skill_name,
)
from skill_memory_agent.skills.load import (
    DirectoryPromptSource,
    MappingPromptSource,
    SkillCatalogLoadError,
    parse_skill_prompt,
)


class TestNormalizeSkillName:
    @pytest.mark.parametrize(
        "alias",
        ["dsa", "data-structures", "algorithms", "data-structures-algorithms"],
    )
    def test_dsa_aliases(self, alias: str):
        assert normalize_skill_name(alias) == "dsa"

    def test_aliases_in_same_class_normalize_identically(self):
        by_skill: dict[Skill, set[str]] = {}
        for alias, skill in SKILL_ALIASES.items():
            by_skill.setdefault(skill, set()).add(normalize_skill_name(alias))

        for skill, normalized in by_skill.items():
            assert normalized == {skill.value}

    def test_case_insensitive_and_trimmed(self):
        assert normalize_skill_name("  Data-Structures-Algorithms ") == "dsa"
        assert normalize_skill_name("BEHAVIOR") == "behavioral"
        assert normalize_skill_name("ML") == "data-science"

    @pytest.mark.parametrize("empty", [None, "", "   "])
    def test_empty_input_uses_default(self, empty):
        assert normalize_skill_name(empty) == "general"

    def test_default_is_not_a_domain_skill(self):
        assert "general" not in SKILL_ALIASES

    def test_unknown_passes_through(self):
        assert normalize_skill_name("Quantum-Cooking") == "quantum-cooking"

    def test_canonical_ids_are_fixed_points(self):
        for skill in Skill:
            assert normalize_skill_name(skill.value) == skill.value


class TestSkillEnum:
    def test_from_id_known(self):
        assert Skill.from_id("system-design") is Skill.SYSTEM_DESIGN

    def test_from_id_open_world(self):
        assert Skill.from_id("quantum-cooking") is None
        assert Skill.from_id(None) is None


class TestParseSkillPrompt:
    def test_parses_frontmatter_and_body(self, tmp_path: Path, write_skill):
        path = write_skill(tmp_path, "dsa", "Solve problems.", description="DSA")

        prompt = parse_skill_prompt(path)

        assert prompt is not None
        assert prompt.skill == "dsa"
        assert prompt.text == "Solve problems."
        assert prompt.description == "DSA"
        assert prompt.path == str(path)

    def test_missing_frontmatter(self, tmp_path: Path):
        skill_dir = tmp_path / "dsa"
        skill_dir.mkdir()
        path = skill_dir / "SKILL.md"
        path.write_text("no frontmatter here", encoding="utf-8")

        assert parse_skill_prompt(path) is None

    def test_missing_description(self, tmp_path: Path):
        skill_dir = tmp_path / "dsa"
        skill_dir.mkdir()
        path = skill_dir / "SKILL.md"
        path.write_text("---\nname: dsa\n---\nbody\n", encoding="utf-8")

        assert parse_skill_prompt(path) is None

    def test_empty_body(self, tmp_path: Path):
        skill_dir = tmp_path / "dsa"
        skill_dir.mkdir()
        path = skill_dir / "SKILL.md"
        path.write_text("---\nname: dsa\ndescription: x\n---\n\n", encoding="utf-8")

        assert parse_skill_prompt(path) is None

    def test_invalid_yaml(self, tmp_path: Path):
        skill_dir = tmp_path / "dsa"
        skill_dir.mkdir()
        path = skill_dir / "SKILL.md"
        path.write_text("---\nname: [unclosed\n---\nbody\n", encoding="utf-8")

        assert parse_skill_prompt(path) is None

    def test_name_must_match_directory(self, tmp_path: Path, caplog):
        skill_dir = tmp_path / "dsa"
        skill_dir.mkdir()
        path = skill_dir / "SKILL.md"
        path.write_text("---\nname: sales\ndescription: x\n---\nbody\n", encoding="utf-8")

        with caplog.at_level(logging.WARNING):
            assert parse_skill_prompt(path) is None

        assert any("디렉토리 이름" in r.message for r in caplog.records)

    @pytest.mark.parametrize("name", ["data_science", "dsa--v2", "x" * 65])
    def test_invalid_name_is_skipped(self, tmp_path: Path, name: str):
        skill_dir = tmp_path / name
        skill_dir.mkdir()
        path = skill_dir / "SKILL.md"
        path.write_text(f"---\nname: {name}\ndescription: x\n---\nbody\n", encoding="utf-8")

        assert parse_skill_prompt(path) is None


class TestDirectoryPromptSource:
    def test_loads_all_skills(self, prompts_dir: Path):
        prompts = DirectoryPromptSource(prompts_dir).load_prompts()

        assert set(prompts) == {"dsa", "behavioral"}

    def test_allowed_skills_filter(self, prompts_dir: Path):
        prompts = DirectoryPromptSource(prompts_dir, allowed_skills=["dsa"]).load_prompts()

        assert set(prompts) == {"dsa"}

    def test_skips_malformed_skill(self, prompts_dir: Path, caplog):
        broken = prompts_dir / "sales"
        broken.mkdir()
        (broken / "SKILL.md").write_text("garbage", encoding="utf-8")

        with caplog.at_level(logging.WARNING):
            prompts = DirectoryPromptSource(prompts_dir).load_prompts()

        assert "sales" not in prompts
        assert "dsa" in prompts
        assert any("프론트매터" in r.message for r in caplog.records)

    def test_ignores_directories_without_skill_file(self, prompts_dir: Path):
        (prompts_dir / "empty").mkdir()

        prompts = DirectoryPromptSource(prompts_dir).load_prompts()

        assert "empty" not in prompts

    def test_missing_directory_is_load_error(self, tmp_path: Path):
        source = DirectoryPromptSource(tmp_path / "missing")

        with pytest.raises(SkillCatalogLoadError):
            source.load_prompts()


class TestSkillCatalog:
    def test_get_prompt(self, catalog: SkillCatalog):
        assert catalog.get_prompt("dsa") == "You are a DSA assistant."

    def test_missing_prompt_is_none(self, catalog: SkillCatalog):
        assert catalog.get_prompt("negotiation") is None
        assert catalog.get_prompt("quantum-cooking") is None

    def test_lazy_load(self, catalog: SkillCatalog):
        assert catalog.is_loaded is False

        catalog.get_prompt("dsa")

        assert catalog.is_loaded is True

    def test_load_is_idempotent(self):
        source = MagicMock()
        source.load_prompts.return_value = {}
        catalog = SkillCatalog(source)

        catalog.load()
        catalog.load()
        catalog.get_prompt("dsa")
        catalog.available_skills()

        assert source.load_prompts.call_count == 1

    def test_load_failure_propagates(self, tmp_path: Path):
        catalog = SkillCatalog(DirectoryPromptSource(tmp_path / "missing"))

        with pytest.raises(SkillCatalogLoadError):
            catalog.get_prompt("dsa")

        assert catalog.is_loaded is False

    def test_os_error_wrapped_as_load_error(self):
        source = MagicMock()
        source.load_prompts.side_effect = PermissionError("denied")
        catalog = SkillCatalog(source)

        with pytest.raises(SkillCatalogLoadError):
            catalog.load()

    def test_available_skills_sorted(self, catalog: SkillCatalog):
        assert catalog.available_skills() == ["behavioral", "dsa"]
        assert catalog.prompt_count == 2

    def test_catalog_from_directory(self, prompts_dir: Path):
        catalog = SkillCatalog(DirectoryPromptSource(prompts_dir))

        assert catalog.get_prompt("behavioral") == "You are a behavioral interview coach."
        assert catalog.get("dsa").description == "desc"

    def test_alias_keys_registered_under_canonical_id(self):
        catalog = SkillCatalog(
            MappingPromptSource({"Algorithms": "Solve it.", "behavior": "Tell a story."})
        )

        assert catalog.available_skills() == ["behavioral", "dsa"]
        assert catalog.get_prompt("dsa") == "Solve it."
        assert catalog.get("dsa").skill == "dsa"

    def test_canonical_key_wins_over_alias(self, caplog):
        catalog = SkillCatalog(
            MappingPromptSource({"algorithms": "Alias text.", "dsa": "Canonical text."})
        )

        with caplog.at_level(logging.WARNING):
            assert catalog.get_prompt("dsa") == "Canonical text."

        assert catalog.prompt_count == 1
        assert any("algorithms" in r.message for r in caplog.records)

    def test_alias_named_directory_is_found(self, tmp_path: Path, write_skill):
        write_skill(tmp_path, "algorithms", "Solve it.")

        catalog = SkillCatalog(DirectoryPromptSource(tmp_path))

        assert catalog.get_prompt("dsa") == "Solve it."


class TestBundledPrompts:
    def test_bundled_directory_exists(self):
        assert BUNDLED_PROMPTS_DIR.is_dir()

    def test_default_catalog_has_dsa(self):
        catalog = default_catalog()

        assert "dsa" in catalog.available_skills()
        assert catalog.get_prompt("dsa")

    def test_default_catalog_custom_dir(self, prompts_dir: Path):
        catalog = default_catalog(prompts_dir)

        assert catalog.available_skills() == ["behavioral", "dsa"]
