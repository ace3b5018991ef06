from __future__ import annotations


class ReminderStateTracker:
    """In-memory (event_id, threshold_label) fired-markers.

    Lost on restart; a threshold near a restart may fire twice or not at all.
    """

    def __init__(self) -> None:
        self._fired: set[tuple[str, str]] = set()

    @staticmethod
    def _key(event_id: str, threshold_label: str) -> tuple[str, str]:
        return (str(event_id), str(threshold_label))

    def has_fired(self, event_id: str, threshold_label: str) -> bool:
        return self._key(event_id, threshold_label) in self._fired

    def mark_fired(self, event_id: str, threshold_label: str) -> None:
        self._fired.add(self._key(event_id, threshold_label))

    def fired_markers(self) -> list[tuple[str, str]]:
        return sorted(self._fired)

    def __len__(self) -> int:
        return len(self._fired)
