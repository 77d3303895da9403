"""Group converted sets into sessions for one source.

Records sharing a (date, time) key belong to the same real-world workout
even when they record different exercises. Within a session, repeated
encounters of an exercise extend its set list instead of adding a second
entry for the same exercise id.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence

from trainlog.sessions.models import ExerciseSession, Session, SessionKey
from trainlog.sets.models import BaseSet


class SessionAccumulator:
    """Session builder for one source."""

    def __init__(self, source: str):
        self.source = source
        self._sessions: dict[SessionKey, Session] = {}
        self._exercise_index: dict[SessionKey, dict[int, ExerciseSession]] = {}
        self.entries_by_year: Counter[str] = Counter()

    def __len__(self) -> int:
        return len(self._sessions)

    def count_entry(self, date: str, count: int = 1) -> None:
        """Record raw records seen for a date, before any filtering."""
        self.entries_by_year[date.split("-", 1)[0]] += count

    def session(
        self,
        date: str,
        time: str,
        name: str,
        duration: int | None = None,
        notes: str | None = None,
    ) -> Session:
        """Return the session for (date, time), creating it on first sight.

        Name, duration and notes come from the first record of the session.
        """
        key = (date, time or "")
        existing = self._sessions.get(key)
        if existing is not None:
            return existing
        session = Session(date=date, time=time or "", name=name, duration=duration or None, notes=notes or None)
        self._sessions[key] = session
        self._exercise_index[key] = {}
        return session

    def add_sets(
        self,
        date: str,
        time: str,
        name: str,
        exercise_id: int,
        sets: Sequence[BaseSet],
        duration: int | None = None,
        notes: str | None = None,
    ) -> Session:
        """Append sets for an exercise to the session keyed by (date, time)."""
        session = self.session(date, time, name, duration=duration, notes=notes)
        index = self._exercise_index[session.key]
        exercise = index.get(exercise_id)
        if exercise is None:
            exercise = ExerciseSession(exercise_id=exercise_id)
            index[exercise_id] = exercise
            session.exercises.append(exercise)
        exercise.sets.extend(sets)
        return session

    def sessions(self) -> list[Session]:
        return list(self._sessions.values())

    def years(self) -> Iterable[str]:
        return {key[0].split("-", 1)[0] for key in self._sessions} | set(self.entries_by_year)
