from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any, Dict

import pytest

from blueprintruntime.cli import main


def _hello_document() -> Dict[str, Any]:
    return {
        "nodes": [
            {
                "id": "start",
                "type": "BeginPlay",
                "outputs": [{"id": "start_out", "label": "", "dataType": "EXEC", "direction": "OUTPUT"}],
            },
            {
                "id": "say",
                "type": "PrintString",
                "inputs": [
                    {"id": "say_in", "label": "", "dataType": "EXEC", "direction": "INPUT"},
                    {"id": "say_text", "label": "In String", "dataType": "STRING", "direction": "INPUT"},
                ],
                "outputs": [{"id": "say_out", "label": "", "dataType": "EXEC", "direction": "OUTPUT"}],
                "properties": {"text": "hello"},
            },
        ],
        "wires": [
            {"id": "w1", "fromNodeId": "start", "fromPinId": "start_out", "toNodeId": "say", "toPinId": "say_in"},
        ],
    }


def _write(tmp_path: Path, doc: Any) -> str:
    path = tmp_path / "blueprint.json"
    path.write_text(json.dumps(doc), encoding="utf-8")
    return str(path)


def test_run_prints_trace_and_exits_zero(tmp_path: Path) -> None:
    out = io.StringIO()

    code = main(["run", _write(tmp_path, _hello_document())], stdout=out)

    assert code == 0
    assert out.getvalue().splitlines() == ["hello", "---", "  (no variables)"]


def test_run_reads_document_from_stdin() -> None:
    out = io.StringIO()

    code = main(["run", "-"], stdout=out, stdin=io.StringIO(json.dumps(_hello_document())))

    assert code == 0
    assert out.getvalue().splitlines()[0] == "hello"


def test_missing_entry_node_exits_two(tmp_path: Path) -> None:
    doc = _hello_document()
    doc["nodes"] = doc["nodes"][1:]
    out = io.StringIO()

    code = main(["run", _write(tmp_path, doc)], stdout=out)

    assert code == 2
    assert out.getvalue().splitlines() == ['Error: "Begin Play" entry node not found.']


@pytest.mark.parametrize("content", ["{not json", json.dumps({"nodes": [{"id": "x", "type": "Nope"}]})])
def test_unloadable_document_exits_one(tmp_path: Path, content: str, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "broken.json"
    path.write_text(content, encoding="utf-8")
    out = io.StringIO()

    code = main(["run", str(path)], stdout=out)

    assert code == 1
    assert out.getvalue() == ""
    assert "could not load blueprint" in capsys.readouterr().err


def test_missing_file_exits_one(tmp_path: Path) -> None:
    assert main(["run", str(tmp_path / "absent.json")], stdout=io.StringIO()) == 1


def test_limits_are_forwarded_to_the_engine(tmp_path: Path) -> None:
    doc = _hello_document()
    # Print feeds back into itself.
    doc["wires"].append(
        {"id": "w2", "fromNodeId": "say", "fromPinId": "say_out", "toNodeId": "say", "toPinId": "say_in"}
    )
    out = io.StringIO()

    code = main(["run", _write(tmp_path, doc), "--max-steps", "4"], stdout=out)

    assert code == 0
    assert out.getvalue().splitlines() == [
        "hello",
        "hello",
        "hello",
        "Error: Maximum execution limit reached. Possible infinite loop.",
        "---",
        "  (no variables)",
    ]


def test_invalid_limits_are_usage_errors(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["run", _write(tmp_path, _hello_document()), "--max-steps", "0"], stdout=io.StringIO())

    assert excinfo.value.code == 2
