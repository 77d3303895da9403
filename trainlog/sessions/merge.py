"""Cross-source session merging, pruning and year partitioning.

Sessions from two sources that share a (date, time) key are the same
workout: their exercise lists are concatenated. Exercises are not
de-duplicated across sources, so the same movement recorded under a legacy
id and a canonical id stays as two entries.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from trainlog.sessions.models import ExerciseSession, Session, SessionKey


def _copy(session: Session) -> Session:
    return session.model_copy(
        update={"exercises": [ExerciseSession(exercise_id=e.exercise_id, sets=list(e.sets)) for e in session.exercises]}
    )


def merge_sources(*sources: Iterable[Session]) -> list[Session]:
    """Merge session collections from several sources.

    The first session seen for a key keeps its name, duration and notes;
    later sessions with the same key only contribute exercises (and fill a
    missing duration or notes). Inputs are not modified.

    Args:
        sources: Session collections, in priority order

    Returns:
        One session per distinct (date, time) key, in first-seen order
    """
    merged: dict[SessionKey, Session] = {}
    for source in sources:
        for session in source:
            existing = merged.get(session.key)
            if existing is None:
                merged[session.key] = _copy(session)
                continue
            existing.exercises.extend(_copy(session).exercises)
            if existing.duration is None and session.duration is not None:
                existing.duration = session.duration
            if existing.notes is None and session.notes is not None:
                existing.notes = session.notes
    return list(merged.values())


def prune_sessions(sessions: Iterable[Session]) -> list[Session]:
    """Drop exercises without sets, then sessions without exercises."""
    pruned: list[Session] = []
    for session in sessions:
        exercises = [e for e in session.exercises if any(s.has_measurement() for s in e.sets)]
        for exercise in exercises:
            exercise.sets = [s for s in exercise.sets if s.has_measurement()]
        if exercises:
            session.exercises = exercises
            pruned.append(session)
    return pruned


def sort_sessions(sessions: Iterable[Session]) -> list[Session]:
    """Sort by (date, time); zero-padded ISO strings order lexicographically."""
    return sorted(sessions, key=lambda s: (s.date, s.time))


def partition_by_year(sessions: Iterable[Session]) -> dict[str, list[Session]]:
    by_year: dict[str, list[Session]] = defaultdict(list)
    for session in sessions:
        by_year[session.year].append(session)
    return dict(by_year)


def merge_year(*sources: Iterable[Session]) -> list[Session]:
    """Merge, prune and sort one year's sessions from every source."""
    return sort_sessions(prune_sessions(merge_sources(*sources)))
