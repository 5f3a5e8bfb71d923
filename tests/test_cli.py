import asyncio
import json
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from xray_core.cli import main
from xray_core.trace_store import LocalTraceStore


@pytest.fixture
def populated(tmp_path: Path, trace_factory) -> Path:
    store = LocalTraceStore(tmp_path)
    base = datetime(2025, 3, 1, 9, 30, tzinfo=UTC)

    async def _fill() -> None:
        await store.save(trace_factory("Older", trace_id="older", start_time=base, steps=2))
        await store.save(trace_factory("Newer", trace_id="newer", start_time=base + timedelta(hours=1)))

    asyncio.run(_fill())
    return tmp_path


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage: xray" in capsys.readouterr().out


def test_list_newest_first(populated: Path, capsys):
    assert main(["--dir", str(populated), "list"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("newer")
    assert lines[1].startswith("older")
    assert "2025-03-01 09:30:00" in lines[1]
    assert "completed" in lines[1]
    assert "1000ms" in lines[1]
    assert "2 steps" in lines[1]
    assert lines[1].endswith("Older")


def test_list_limit(populated: Path, capsys):
    assert main(["--dir", str(populated), "list", "--limit", "1"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 1
    assert lines[0].startswith("newer")


def test_list_empty(tmp_path: Path, capsys):
    assert main(["--dir", str(tmp_path), "list"]) == 0
    assert "No traces found." in capsys.readouterr().out


def test_show_prints_record(populated: Path, capsys):
    assert main(["--dir", str(populated), "show", "older"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["id"] == "older"
    assert len(data["steps"]) == 2
    assert "startTime" in data


def test_show_missing(populated: Path, capsys):
    assert main(["--dir", str(populated), "show", "nope"]) == 1
    assert "Error:" in capsys.readouterr().err


def test_show_invalid_id(populated: Path, capsys):
    assert main(["--dir", str(populated), "show", "../older"]) == 1
    assert "Invalid trace id" in capsys.readouterr().err


def test_delete(populated: Path, capsys):
    assert main(["--dir", str(populated), "delete", "older"]) == 0
    assert "Deleted older" in capsys.readouterr().out
    assert not (populated / "traces" / "older.json").exists()

    assert main(["--dir", str(populated), "delete", "older"]) == 1


def test_clear(populated: Path, capsys):
    assert main(["--dir", str(populated), "clear"]) == 0
    assert "Removed 2 trace(s)" in capsys.readouterr().out
    assert list((populated / "traces").iterdir()) == []


def test_corrupt_record_reported(tmp_path: Path, capsys):
    traces = tmp_path / "traces"
    traces.mkdir()
    (traces / "broken.json").write_text("{", encoding="utf-8")

    assert main(["--dir", str(tmp_path), "show", "broken"]) == 1
    assert "corrupt" in capsys.readouterr().err
