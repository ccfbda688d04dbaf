from __future__ import annotations

from pathlib import Path

from sheet_snapshot.cli import main as cli_main


def test_cli_debug_mode(temp_workdir: Path, write_config: Path, fake_transport, capsys):
    """--debug turns on DEBUG output, including the per-sheet column listing."""
    code = cli_main(["--debug"], transport=fake_transport)

    out = capsys.readouterr().out
    assert code == 0
    assert "DEBUG debug mode enabled" in out
    assert "DEBUG [Locations Metadata] Columns: location_database_name, Display Name, Population" in out
    assert "INFO [Locations Metadata] Raw: 3 -> Filtered: 2 rows" in out


def test_cli_without_debug_hides_debug_lines(temp_workdir: Path, write_config: Path, fake_transport, capsys):
    code = cli_main([], transport=fake_transport)

    out = capsys.readouterr().out
    assert code == 0
    assert "DEBUG" not in out
    assert "INFO [Locations Metadata] Raw: 3 -> Filtered: 2 rows" in out
