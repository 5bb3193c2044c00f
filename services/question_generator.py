"""
Question selection for interview sessions.

A ``QuestionGenerator`` remembers which titles it has already issued so a
session does not see the same question twice until its pool runs out.
Generators are owned per session through ``SessionQuestionGenerators``.
"""
import random
import threading
import time
from collections import OrderedDict
from typing import Callable, List, Optional, Tuple

from core.config import SESSION_GENERATOR_LIMIT, SESSION_GENERATOR_TTL_SECONDS
from core.logger import setup_logger
from models.interview import Question
from services.question_bank import pool_for

logger = setup_logger("question_generator")


class QuestionGenerator:
    """
    Picks non-repeating questions from the per-major pools.

    When fewer unused questions remain than requested, the used-set is
    cleared and the whole pool becomes available again.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.used_titles = set()

    def generate_questions(self, major: str, count: int) -> List[Question]:
        """
        Select up to ``count`` questions for ``major``.

        Args:
            major: Pool key; unknown majors get a synthesized 3-question pool
            count: Number of questions wanted

        Returns:
            List of min(count, pool size) questions in random order
        """
        if count <= 0:
            return []

        pool = pool_for(major)
        available = [q for q in pool if q.title not in self.used_titles]

        if len(available) < count:
            logger.debug(f"Pool for '{major}' exhausted ({len(available)} left, {count} wanted), recycling")
            self.used_titles.clear()
            available = list(pool)

        selected = []
        while len(selected) < count and available:
            question = available.pop(self.rng.randrange(len(available)))
            selected.append(question)
            self.used_titles.add(question.title)

        return selected

    def available_pool_size(self, major: str) -> int:
        return len(pool_for(major))

    def reset(self):
        """Forget issued questions; call at the start of a new interview."""
        self.used_titles.clear()


class SessionQuestionGenerators:
    """
    Per-session generator registry, so sessions never share a used-set.

    Entries live in process memory. Sessions that are never ended are
    evicted once idle for ``ttl_seconds``, and the least recently used
    entry goes first when more than ``max_sessions`` are held.
    """

    def __init__(self, max_sessions: int = SESSION_GENERATOR_LIMIT,
                 ttl_seconds: float = SESSION_GENERATOR_TTL_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        self.max_sessions = max_sessions
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        # session_id -> (generator, last used), least recently used first
        self._generators: "OrderedDict[int, Tuple[QuestionGenerator, float]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id: int) -> QuestionGenerator:
        with self._lock:
            now = self._clock()
            self._evict_expired(now)

            entry = self._generators.pop(session_id, None)
            generator = entry[0] if entry else QuestionGenerator()
            self._generators[session_id] = (generator, now)

            while len(self._generators) > self.max_sessions:
                evicted, _ = self._generators.popitem(last=False)
                logger.info(f"Evicted question generator of session {evicted} (limit {self.max_sessions})")
            return generator

    def discard(self, session_id: int):
        with self._lock:
            self._generators.pop(session_id, None)

    def _evict_expired(self, now: float):
        while self._generators:
            session_id, (_, last_used) = next(iter(self._generators.items()))
            if now - last_used < self.ttl_seconds:
                break
            del self._generators[session_id]
            logger.debug(f"Evicted idle question generator of session {session_id}")

    def __contains__(self, session_id: int) -> bool:
        return session_id in self._generators

    def __len__(self):
        return len(self._generators)


session_generators = SessionQuestionGenerators()
