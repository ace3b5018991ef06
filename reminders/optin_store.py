from __future__ import annotations

import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any


OPTIN_KEY = "optedInUserIds"
LEGACY_OPTIN_KEYS = ("dmOptInUserIds",)


def _coerce_user_ids(values: Any) -> set[int]:
    if not isinstance(values, list):
        return set()
    out: set[int] = set()
    for value in values:
        text = str(value).strip()
        if re.fullmatch(r"\d{1,22}", text):
            out.add(int(text))
    return out


class OptInRegistry:
    """Durable set of user ids who asked for reminder DMs.

    The whole document is rewritten on every mutation; concurrent writers are last-writer-wins.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _ensure_store(self) -> None:
        if self.path.exists():
            return
        self._write_ids(set())

    def _read_document(self) -> dict[str, Any]:
        self._ensure_store()
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except Exception as e:
            print(f"[OptIns] unreadable store {self.path}: {e}; treating as empty")
            return {}
        return payload if isinstance(payload, dict) else {}

    def _write_ids(self, ids: set[int]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {OPTIN_KEY: [str(uid) for uid in sorted(ids)]}
        fd, tmp_name = tempfile.mkstemp(prefix=".optins-", suffix=".json", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise

    def list_opted_in(self) -> set[int]:
        try:
            doc = self._read_document()
        except OSError as e:
            print(f"[OptIns] could not initialize store {self.path}: {e}")
            return set()
        if OPTIN_KEY in doc:
            return _coerce_user_ids(doc.get(OPTIN_KEY))
        for key in LEGACY_OPTIN_KEYS:
            if key in doc:
                return _coerce_user_ids(doc.get(key))
        return set()

    def opt_in(self, user_id: int) -> bool:
        ids = self.list_opted_in()
        added = int(user_id) not in ids
        ids.add(int(user_id))
        self._write_ids(ids)
        return added

    def opt_out(self, user_id: int) -> bool:
        ids = self.list_opted_in()
        removed = int(user_id) in ids
        ids.discard(int(user_id))
        self._write_ids(ids)
        return removed
