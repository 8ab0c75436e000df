"""스킬 메모리 프로토콜 설정."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from skill_memory_agent.memory.recorder import DEFAULT_RESPONSE_PREVIEW_LENGTH

ENV_PREFIX = "SKILL_MEMORY_"


@dataclass(frozen=True)
class SkillMemoryConfig:
    """요청 생성과 메모리 기록 설정."""

    model: str = "gemini-2.5-flash"
    """요청에 기록될 모델 이름."""

    temperature: float = 0.7

    max_output_tokens: int = 2048

    response_preview_length: int = DEFAULT_RESPONSE_PREVIEW_LENGTH
    """메모리에 저장할 응답 미리보기 최대 길이. 기본값 200자."""

    prompts_dir: Path | None = None
    """스킬 프롬프트 디렉토리. None이면 번들된 프롬프트 사용."""

    @property
    def generation_config(self) -> dict[str, float | int]:
        return {
            "temperature": self.temperature,
            "max_output_tokens": self.max_output_tokens,
        }

    @classmethod
    def from_env(cls) -> "SkillMemoryConfig":
        """`.env`와 환경 변수(`SKILL_MEMORY_*`)에서 설정을 읽습니다."""
        load_dotenv()
        defaults = cls()

        prompts_dir = os.environ.get(f"{ENV_PREFIX}PROMPTS_DIR")

        return cls(
            model=os.environ.get(f"{ENV_PREFIX}MODEL", defaults.model),
            temperature=float(
                os.environ.get(f"{ENV_PREFIX}TEMPERATURE", defaults.temperature)
            ),
            max_output_tokens=int(
                os.environ.get(f"{ENV_PREFIX}MAX_OUTPUT_TOKENS", defaults.max_output_tokens)
            ),
            response_preview_length=int(
                os.environ.get(
                    f"{ENV_PREFIX}PREVIEW_LENGTH", defaults.response_preview_length
                )
            ),
            prompts_dir=Path(prompts_dir).expanduser() if prompts_dir else None,
        )
