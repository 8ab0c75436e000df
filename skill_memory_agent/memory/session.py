"""프로세스 수명 동안의 스킬 지침 전송 추적.

이 집합은 최적화 힌트일 뿐 결정의 근거가 아닙니다. 언제 초기화되거나
버려져도 메모리 검사기의 결정은 바뀌지 않습니다.
"""

import threading


class SessionTracker:
    """지침이 한 번 이상 전송된 정규 스킬 식별자 집합 (스레드 안전)."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._dispatched: set[str] = set()

    def mark_dispatched(self, skill_id: str) -> None:
        with self._lock:
            self._dispatched.add(skill_id)

    def was_dispatched(self, skill_id: str) -> bool:
        with self._lock:
            return skill_id in self._dispatched

    @property
    def dispatched_skills(self) -> list[str]:
        with self._lock:
            return sorted(self._dispatched)

    def __len__(self) -> int:
        with self._lock:
            return len(self._dispatched)

    def reset(self) -> None:
        with self._lock:
            self._dispatched.clear()
