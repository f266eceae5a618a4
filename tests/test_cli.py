import pytest
from openpyxl import load_workbook

from eventdash import cli
from eventdash.data.store import DataStore

from conftest import SOURCES, FakeFetcher


@pytest.fixture
def use_sources(monkeypatch):
    """Point the CLI's DataStore at in-memory sources."""
    def install(sources):
        monkeypatch.setattr(cli, "DataStore", lambda: DataStore(FakeFetcher(sources), SOURCES))
    return install


def test_stats(use_sources, sample_sources, capsys):
    use_sources(sample_sources)
    cli.main(["stats"])
    out = capsys.readouterr().out
    assert "Total registrations:" in out
    (group_line,) = [line for line in out.splitlines() if "Group registrations:" in line]
    assert group_line.split()[-1] == "1"


def test_events_sorted(use_sources, sample_sources, capsys):
    use_sources(sample_sources)
    cli.main(["events", "--type", "technical", "--sort", "registrations"])
    out = capsys.readouterr().out
    assert "EVENTS (2)" in out
    assert out.index("Hackathon") < out.index("Code Sprint")
    assert "Quiz" not in out


def test_registrations_roster(use_sources, sample_sources, capsys):
    use_sources(sample_sources)
    cli.main(["registrations", "e1"])
    out = capsys.readouterr().out
    assert "Group: Team A — 3 members" in out
    assert "alice  (Leader)" in out
    assert "Unknown User" in out


def test_registrations_unknown_event(use_sources, sample_sources, capsys):
    use_sources(sample_sources)
    cli.main(["registrations", "nope"])
    assert "No registrations." in capsys.readouterr().out


def test_export(use_sources, sample_sources, tmp_path, capsys):
    use_sources(sample_sources)
    output = tmp_path / "report.xlsx"
    cli.main(["export", "--output", str(output)])
    assert "Saved:" in capsys.readouterr().out
    assert load_workbook(output).sheetnames[0] == "Summary"


def test_load_error_exits_nonzero(use_sources, sample_sources, capsys):
    sample_sources["registrations.json"] = OSError("no such file")
    use_sources(sample_sources)
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["stats"])
    assert excinfo.value.code == 1
    assert "registrations.json" in capsys.readouterr().err


def test_no_command_prints_help(capsys):
    cli.main([])
    assert "usage:" in capsys.readouterr().out
