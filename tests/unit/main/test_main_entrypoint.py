from __future__ import annotations

import runpy

import uvicorn


def test_main_module_runs_uvicorn(monkeypatch):
    executed = {}

    def fake_run(app: str, **kwargs) -> None:
        executed["app"] = app
        executed.update(kwargs)

    monkeypatch.setattr(uvicorn, "run", fake_run)

    runpy.run_module("aquacast.main.__main__", run_name="__main__")

    assert executed["app"] == "aquacast.main.app:app"
    assert executed["port"] == 8000
    assert executed["log_level"] in {"debug", "info", "warning", "error", "critical"}
