"""Quest log — the quest collaborator whose active set the store snapshots.

Quest state transitions live here; the progression store only copies
the ``active`` collection into the save document.
"""

from __future__ import annotations

from typing import Iterable, Protocol

from progstore.models.save_document import QuestRecord


class QuestPort(Protocol):
    active: dict[str, QuestRecord]


class QuestLog:
    """Accepted quests keyed by quest id."""

    def __init__(self, records: Iterable[QuestRecord] = ()) -> None:
        self.active: dict[str, QuestRecord] = {}
        self.restore(records)

    def restore(self, records: Iterable[QuestRecord]) -> None:
        """Replace the active set. Later records win for duplicate ids."""
        self.active = {r.quest_id: r.model_copy() for r in records}

    def accept(self, quest_id: str) -> QuestRecord:
        """Accept a quest, or return the existing record if already active."""
        record = self.active.get(quest_id)
        if record is None:
            record = QuestRecord(quest_id=quest_id)
            self.active[quest_id] = record
        return record

    def advance(self, quest_id: str, amount: int = 1, target: int | None = None) -> QuestRecord | None:
        """Add progress to an active quest; marks it completed once *target* is reached."""
        record = self.active.get(quest_id)
        if record is None:
            return None
        record.progress += amount
        if target is not None and record.progress >= target:
            record.completed = True
        return record

    def turn_in(self, quest_id: str) -> bool:
        """Remove a completed quest. Returns False if it is unknown or unfinished."""
        record = self.active.get(quest_id)
        if record is None or not record.completed:
            return False
        del self.active[quest_id]
        return True
