from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from config.defaults import BRAND_NAME
from config.defaults import DEFAULT_REMINDER_TOLERANCE_MINUTES


THRESHOLD_TOKEN_RE = re.compile(r"^([A-Za-z0-9_.-]+)\s*=\s*(\d{1,6})$")


@dataclass(frozen=True, slots=True)
class ReminderThreshold:
    label: str
    minutes_before: int
    message: str = ""

    def announcement(self) -> str:
        if self.message:
            return self.message
        return f"⏳ **{self.label}** until the next {BRAND_NAME}."


@dataclass(frozen=True, slots=True)
class ReminderConfig:
    thresholds: list[ReminderThreshold] = field(default_factory=list)
    tolerance_minutes: int = DEFAULT_REMINDER_TOLERANCE_MINUTES


def default_reminder_config() -> ReminderConfig:
    return ReminderConfig(
        thresholds=[
            ReminderThreshold(
                label="24h",
                minutes_before=24 * 60,
                message=f"⏳ **24 hours** until the next {BRAND_NAME}.",
            )
        ],
        tolerance_minutes=DEFAULT_REMINDER_TOLERANCE_MINUTES,
    )


def _dedupe_labels(thresholds: list[ReminderThreshold]) -> list[ReminderThreshold]:
    seen: set[str] = set()
    out: list[ReminderThreshold] = []
    for threshold in thresholds:
        if threshold.label in seen:
            continue
        seen.add(threshold.label)
        out.append(threshold)
    return out


def parse_thresholds(raw: str | None) -> list[ReminderThreshold]:
    """Parse "24h=1440,2h=120". Raises ValueError on any malformed entry."""
    text = (raw or "").strip()
    if not text:
        return []
    out: list[ReminderThreshold] = []
    for tok in re.split(r"[,;]+", text):
        tok = tok.strip()
        if not tok:
            continue
        m = THRESHOLD_TOKEN_RE.fullmatch(tok)
        if not m:
            raise ValueError(f"Invalid reminder threshold: {tok!r} (expected label=minutes)")
        out.append(ReminderThreshold(label=m.group(1), minutes_before=int(m.group(2))))
    return _dedupe_labels(out)


def _threshold_from_mapping(item: Any) -> ReminderThreshold | None:
    if not isinstance(item, dict):
        return None
    label = str(item.get("label") or "").strip()
    if not label:
        return None
    try:
        minutes = int(item.get("minutes_before"))
    except (TypeError, ValueError):
        return None
    if minutes < 0:
        return None
    return ReminderThreshold(
        label=label,
        minutes_before=minutes,
        message=str(item.get("message") or "").strip(),
    )


def _coerce_tolerance(value: Any, fallback: int) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return fallback


def load_reminder_config(
    path: str | Path | None,
    *,
    env_thresholds: str | None = None,
    env_tolerance: str | None = None,
) -> tuple[ReminderConfig, str | None]:
    """
    Returns (config, warning_message). warning_message is None on clean load.

    Resolution order: env threshold string, then YAML file, then built-in 24h default.
    """
    defaults = default_reminder_config()
    warning: str | None = None
    thresholds: list[ReminderThreshold] = []
    tolerance = defaults.tolerance_minutes

    payload: dict[str, Any] = {}
    if path:
        p = Path(path)
        if p.exists():
            try:
                loaded = yaml.safe_load(p.read_text(encoding="utf-8"))
            except Exception as exc:
                warning = f"Failed to read reminder thresholds from {p}: {exc}; using built-in defaults."
                loaded = None
            if isinstance(loaded, dict):
                payload = loaded
            elif loaded is not None and warning is None:
                warning = f"Invalid reminder thresholds format in {p}; using built-in defaults."
        else:
            warning = f"Reminder thresholds file not found at {p}; using built-in defaults."

    if payload:
        tolerance = _coerce_tolerance(payload.get("tolerance_minutes"), tolerance)
        items = payload.get("thresholds") if isinstance(payload.get("thresholds"), list) else []
        thresholds = _dedupe_labels([t for t in (_threshold_from_mapping(i) for i in items) if t is not None])
        if not thresholds:
            warning = f"No valid thresholds in {path}; using built-in defaults."

    if env_thresholds is not None and env_thresholds.strip():
        try:
            parsed = parse_thresholds(env_thresholds)
        except ValueError as exc:
            warning = f"{exc}; ignoring CABANA_REMINDER_THRESHOLDS."
        else:
            # Keep file-provided messages for labels that match.
            messages = {t.label: t.message for t in thresholds}
            thresholds = [
                ReminderThreshold(label=t.label, minutes_before=t.minutes_before, message=messages.get(t.label, ""))
                for t in parsed
            ]
            warning = None

    if env_tolerance is not None and env_tolerance.strip():
        tolerance = _coerce_tolerance(env_tolerance.strip(), tolerance)

    if not thresholds:
        thresholds = list(defaults.thresholds)
    return (ReminderConfig(thresholds=thresholds, tolerance_minutes=tolerance), warning)
