"""대화 메모리 검사와 기록."""

from skill_memory_agent.memory.entry import MemoryAction, MemoryEntry
from skill_memory_agent.memory.inspector import (
    is_first_time_interaction,
    should_send_instruction,
)
from skill_memory_agent.memory.recorder import (
    DEFAULT_RESPONSE_PREVIEW_LENGTH,
    append_memory_entry,
    truncate_response,
)
from skill_memory_agent.memory.session import SessionTracker

__all__ = [
    "MemoryAction",
    "MemoryEntry",
    "is_first_time_interaction",
    "should_send_instruction",
    "DEFAULT_RESPONSE_PREVIEW_LENGTH",
    "append_memory_entry",
    "truncate_response",
    "SessionTracker",
]
