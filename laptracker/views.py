"""State and notifications of the runner listing page.

The page keeps its own copy of the runner list. ``static/runners.js`` replaces
the copy wholesale when a refresh succeeds and removes a row only after the
server confirmed the delete, using the texts from :func:`client_config`. The
no-script delete fallback maps its outcome through :func:`delete_toast`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .schemas import RunnerRecord


@dataclass(frozen=True)
class Toast:
    key: str
    message: str
    appearance: str  # success | error

    def to_json(self) -> dict:
        return {"message": self.message, "appearance": self.appearance}


TOAST_DELETED = Toast("deleted", "Läufer erfolgreich gelöscht", "success")
TOAST_FORBIDDEN = Toast("forbidden", "Fehlende Berechtigung", "error")
TOAST_NOT_FOUND = Toast("not_found", "Läufer nicht gefunden", "error")
TOAST_ERROR = Toast("error", "Ein Fehler ist aufgetreten", "error")

TOASTS = {t.key: t for t in (TOAST_DELETED, TOAST_FORBIDDEN, TOAST_NOT_FOUND, TOAST_ERROR)}

_DELETE_TOASTS = {200: TOAST_DELETED, 403: TOAST_FORBIDDEN, 404: TOAST_NOT_FOUND}

EMPTY_MESSAGE = "Keine Läufer vorhanden"


def delete_toast(status_code: int) -> Toast:
    return _DELETE_TOASTS.get(status_code, TOAST_ERROR)


def toast_for_notice(key: Optional[str]) -> Optional[Toast]:
    if not key:
        return None
    return TOASTS.get(key)


def client_config() -> dict:
    return {
        "deleteToasts": {str(code): t.to_json() for code, t in _DELETE_TOASTS.items()},
        "errorToast": TOAST_ERROR.to_json(),
        "emptyMessage": EMPTY_MESSAGE,
    }


class RunnerTable:
    """Rows rendered into the runner page and handed to the script as JSON."""

    def __init__(self, runners: Iterable[RunnerRecord] = ()) -> None:
        self.runners: list[RunnerRecord] = list(runners)

    @property
    def is_empty(self) -> bool:
        return len(self.runners) == 0

    def to_json(self) -> list[dict]:
        return [r.to_json() for r in self.runners]
