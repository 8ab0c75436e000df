"""프로그래밍 언어 컨텍스트 주입.

프로그래밍 언어가 필요한 스킬의 프롬프트 끝에 언어별 행동 지침 블록을
덧붙입니다. 같은 프롬프트에 두 번 적용하면 블록이 중복되므로,
호출자는 턴당 한 번만 적용해야 합니다.
"""

from dataclasses import dataclass

from skill_memory_agent.skills.catalog import Skill, normalize_skill_name

SKILLS_REQUIRING_PROGRAMMING_LANGUAGE: frozenset[str] = frozenset({Skill.DSA.value})


@dataclass(frozen=True)
class LanguageSpec:
    """표시용 언어 이름과 코드 펜스 태그."""

    title: str
    fence_tag: str

    @property
    def upper_title(self) -> str:
        return self.title.upper()


KNOWN_LANGUAGES: dict[str, LanguageSpec] = {
    "cpp": LanguageSpec(title="C++", fence_tag="cpp"),
    "c": LanguageSpec(title="C", fence_tag="c"),
    "python": LanguageSpec(title="Python", fence_tag="python"),
    "java": LanguageSpec(title="Java", fence_tag="java"),
    "javascript": LanguageSpec(title="JavaScript", fence_tag="javascript"),
    "js": LanguageSpec(title="JavaScript", fence_tag="javascript"),
}


def resolve_language(programming_language: str) -> LanguageSpec:
    """언어 문자열을 표시 이름과 펜스 태그로 해석합니다.

    알 수 없는 언어는 첫 글자만 대문자로 바꾼 이름과 소문자 원문 태그를 사용합니다.
    """
    raw = programming_language or ""
    known = KNOWN_LANGUAGES.get(raw.lower())
    if known is not None:
        return known
    return LanguageSpec(
        title=raw[:1].upper() + raw[1:],
        fence_tag=raw.lower() or "text",
    )


def requires_programming_language(skill_name: str | None) -> bool:
    return normalize_skill_name(skill_name) in SKILLS_REQUIRING_PROGRAMMING_LANGUAGE


def inject_programming_language(
    prompt_content: str,
    programming_language: str,
    skill_id: str,
) -> str:
    """스킬 프롬프트에 프로그래밍 언어 컨텍스트를 덧붙입니다.

    Args:
        prompt_content: 원본 프롬프트
        programming_language: 주입할 언어 (원시 문자열)
        skill_id: 정규 스킬 식별자

    Returns:
        언어 지침 블록이 덧붙여진 프롬프트
    """
    spec = resolve_language(programming_language)
    title, fence_tag, upper = spec.title, spec.fence_tag, spec.upper_title

    if Skill.from_id(skill_id) is Skill.DSA:
        injection = (
            f"\n\n## IMPLEMENTATION LANGUAGE: {upper}\n"
            "STRICT REQUIREMENTS:\n"
            f"- Respond ONLY in {title}. Do not include any snippets or "
            "alternatives in other languages.\n"
            "- All code blocks must use triple backticks with the exact "
            f"language tag: ```{fence_tag}```.\n"
            "- Aim for the best possible time and space complexity; prefer "
            "optimal algorithms and data structures.\n"
            f"- Provide: brief approach, then final {title} implementation, "
            "followed by time/space complexity.\n"
            "- If the user's input is a problem statement (and does not include "
            f"code), produce a complete, runnable {title} solution without "
            "asking for clarification.\n"
            "- Avoid unnecessary verbosity; focus on correctness, clarity, "
            "and efficiency."
        )
    else:
        injection = (
            f"\n\n## PROGRAMMING LANGUAGE: {upper}\n"
            f"All code and examples must be in {title}. "
            f"Use code fences with tag: ```{fence_tag}```."
        )

    return prompt_content + injection


def apply_language_context(
    prompt_content: str,
    programming_language: str | None,
    skill_id: str,
) -> str:
    """언어가 주어지고 스킬이 언어를 요구할 때만 주입을 적용합니다."""
    if programming_language and skill_id in SKILLS_REQUIRING_PROGRAMMING_LANGUAGE:
        return inject_programming_language(prompt_content, programming_language, skill_id)
    return prompt_content
