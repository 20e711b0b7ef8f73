"""CLI tests for kbatch."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

import keyed_batcher.cli as cli
from keyed_batcher import __version__

runner = CliRunner()


def test_batch_writes_json_mapping(sample_jsonl: Path) -> None:
    result = runner.invoke(
        cli.app,
        ["batch", str(sample_jsonl), "--key-field", "topic", "--batch-size", "2"],
    )

    assert result.exit_code == 0
    output = json.loads(result.stdout)
    assert list(output) == ["auth-logs", "threat-events"]
    assert [[r["id"] for r in batch] for batch in output["auth-logs"]] == [[0, 2], [3]]
    assert [[r["id"] for r in batch] for batch in output["threat-events"]] == [[1, 4]]


def test_batch_writes_jsonl_batches(sample_jsonl: Path) -> None:
    result = runner.invoke(
        cli.app,
        ["batch", str(sample_jsonl), "-k", "topic", "-b", "2", "--format", "jsonl"],
    )

    assert result.exit_code == 0
    lines = [json.loads(line) for line in result.stdout.splitlines()]
    assert [(line["key"], line["batch_index"], len(line["items"])) for line in lines] == [
        ("auth-logs", 0, 2),
        ("auth-logs", 1, 1),
        ("threat-events", 0, 2),
    ]


def test_batch_reads_stdin_and_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KEYED_BATCHER_BATCH_SIZE", "1")
    stdin = '{"key": "a", "v": 1}\n{"key": "a", "v": 2}\n'

    result = runner.invoke(cli.app, ["batch", "-"], input=stdin)

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"a": [[{"key": "a", "v": 1}], [{"key": "a", "v": 2}]]}


def test_batch_writes_output_file(sample_jsonl: Path, tmp_path: Path) -> None:
    out = tmp_path / "batches.json"

    result = runner.invoke(
        cli.app,
        ["batch", str(sample_jsonl), "-k", "topic", "--output", str(out)],
    )

    assert result.exit_code == 0
    assert "Wrote 5 records" in result.stdout
    assert set(json.loads(out.read_text())) == {"auth-logs", "threat-events"}


def test_batch_rejects_record_without_key(tmp_path: Path) -> None:
    path = tmp_path / "bad.jsonl"
    path.write_text('{"topic": "a"}\n{"other": 1}\n')

    result = runner.invoke(cli.app, ["batch", str(path), "-k", "topic"])

    assert result.exit_code == 2
    assert "line 2" in result.output
    assert "{" not in result.output


@pytest.mark.parametrize("content", ["not json\n", "[1, 2]\n"])
def test_batch_rejects_malformed_records(tmp_path: Path, content: str) -> None:
    path = tmp_path / "bad.jsonl"
    path.write_text(content)

    result = runner.invoke(cli.app, ["batch", str(path)])

    assert result.exit_code == 2
    assert "line 1" in result.output


def test_batch_rejects_invalid_batch_size(sample_jsonl: Path) -> None:
    result = runner.invoke(cli.app, ["batch", str(sample_jsonl), "--batch-size", "0"])

    assert result.exit_code == 2


def test_batch_rejects_unknown_format(sample_jsonl: Path) -> None:
    result = runner.invoke(cli.app, ["batch", str(sample_jsonl), "--format", "xml"])

    assert result.exit_code == 2


def test_batch_missing_file_is_an_error(tmp_path: Path) -> None:
    result = runner.invoke(cli.app, ["batch", str(tmp_path / "missing.jsonl")])

    assert result.exit_code == 1


def test_stats_prints_per_key_counts(sample_jsonl: Path) -> None:
    result = runner.invoke(
        cli.app, ["stats", str(sample_jsonl), "-k", "topic", "-b", "2"]
    )

    assert result.exit_code == 0
    assert "auth-logs" in result.stdout
    assert "threat-events" in result.stdout
    assert "Total: 5 items, 3 batches, 2 keys" in result.stdout


def test_stats_on_empty_input(tmp_path: Path) -> None:
    path = tmp_path / "empty.jsonl"
    path.write_text("\n")

    result = runner.invoke(cli.app, ["stats", str(path)])

    assert result.exit_code == 0
    assert "No records found" in result.stdout


def test_version_flag() -> None:
    result = runner.invoke(cli.app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_batch_undecodable_stdin_is_an_error() -> None:
    result = runner.invoke(cli.app, ["batch", "-"], input=b'{"key": "a", "v": "\xff"}\n')

    assert result.exit_code == 1
    assert not isinstance(result.exception, UnicodeDecodeError)
    assert "Error reading -" in result.output


@pytest.mark.parametrize("command", ["batch", "stats"])
def test_empty_key_field_is_rejected(sample_jsonl: Path, command: str) -> None:
    result = runner.invoke(cli.app, [command, str(sample_jsonl), "--key-field", ""])

    assert result.exit_code == 2
    assert "--key-field must not be empty" in result.output
