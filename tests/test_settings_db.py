from __future__ import annotations

import pytest

from laptracker.db import dispose_db, init_db
from laptracker.settings import Settings


def test_settings_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("LAPTRACKER_SECRET_KEY", "from-env")
    monkeypatch.setenv("LAPTRACKER_SESSION_MAX_AGE", "60")
    monkeypatch.delenv("LAPTRACKER_LOG_LEVEL", raising=False)
    monkeypatch.setenv("laptracker_log_level", "DEBUG")

    s = Settings()
    assert s.LAPTRACKER_SECRET_KEY == "from-env"
    assert s.LAPTRACKER_SESSION_MAX_AGE == 60
    # names are case sensitive
    assert s.LAPTRACKER_LOG_LEVEL == "INFO"


def test_init_db_refuses_to_switch_url(tmp_path) -> None:
    first = f"sqlite:///{tmp_path / 'a.db'}"
    dispose_db()
    try:
        init_db(first)
        init_db(first)
        with pytest.raises(RuntimeError):
            init_db(f"sqlite:///{tmp_path / 'b.db'}")
    finally:
        dispose_db()

    init_db(f"sqlite:///{tmp_path / 'b.db'}")
    dispose_db()
