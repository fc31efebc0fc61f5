# app/core/session_store.py
import threading
import time
import uuid
from abc import ABC, abstractmethod


class SessionStore(ABC):
    """세션 저장소 인터페이스 (세션 ID → 오너 ID, 만료 포함)"""

    @abstractmethod
    def get(self, session_id: str) -> int | None:
        """만료되지 않은 세션의 오너 ID, 없으면 None"""

    @abstractmethod
    def set(self, session_id: str, owner_id: int, ttl_seconds: int) -> None:
        ...

    @abstractmethod
    def delete(self, session_id: str) -> None:
        ...

    def create(self, owner_id: int, ttl_seconds: int) -> str:
        """새 세션 발급"""
        session_id = str(uuid.uuid4())
        self.set(session_id, owner_id, ttl_seconds)
        return session_id


class InMemorySessionStore(SessionStore):
    """프로세스 메모리 세션 저장소 (재시작하면 로그아웃됨)"""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._sessions: dict[str, tuple[int, float]] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> int | None:
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None:
                return None

            owner_id, expires_at = entry
            if self._clock() >= expires_at:
                # 만료된 세션은 조회 시점에 정리
                del self._sessions[session_id]
                return None
            return owner_id

    def set(self, session_id: str, owner_id: int, ttl_seconds: int) -> None:
        with self._lock:
            self._sessions[session_id] = (owner_id, self._clock() + ttl_seconds)

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def purge_expired(self) -> int:
        """만료 세션 일괄 정리, 정리한 개수 반환"""
        now = self._clock()
        with self._lock:
            expired = [sid for sid, (_, exp) in self._sessions.items() if now >= exp]
            for sid in expired:
                del self._sessions[sid]
        return len(expired)
