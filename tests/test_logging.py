from __future__ import annotations

import io
import json
import subprocess
import sys

import structlog
from structlog.testing import capture_logs

from blueprintruntime import EngineConfig, GraphBuilder, NodeKind, run_graph
from blueprintruntime.logging import configure_logging, get_logger


def test_json_logs_go_to_the_configured_stream_not_the_trace() -> None:
    stream = io.StringIO()
    configure_logging(json_output=True, log_level="WARNING", stream=stream)
    try:
        b = GraphBuilder()
        start = b.add_node(NodeKind.BEGIN_PLAY)
        say = b.add_node(NodeKind.PRINT_STRING, properties={"text": "again"})
        b.connect(start, "", say, "")
        b.connect(say, "", say, "")

        lines = run_graph(b.build(), config=EngineConfig(max_steps=3))
    finally:
        configure_logging(stream=io.StringIO())

    assert lines[-3] == "Error: Maximum execution limit reached. Possible infinite loop."
    events = [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]
    limit_events = [e for e in events if e["event"] == "execution step limit reached"]
    assert limit_events and limit_events[0]["max_steps"] == 3
    assert limit_events[0]["level"] == "warning"


def test_get_logger_binds_initial_values() -> None:
    stream = io.StringIO()
    configure_logging(json_output=True, log_level="INFO", include_timestamps=False, stream=stream)
    try:
        get_logger("blueprintruntime.tests", component="loader").info("loaded", nodes=2)
    finally:
        configure_logging(stream=io.StringIO())

    event = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert event["event"] == "loaded"
    assert event["component"] == "loader"
    assert event["nodes"] == 2
    assert "timestamp" not in event


def test_importing_the_package_leaves_structlog_unconfigured() -> None:
    code = (
        "import structlog\n"
        "import blueprintruntime\n"
        "from blueprintruntime.engine import interpreter, trace\n"
        "print(structlog.is_configured())\n"
        "structlog.get_logger(\"host\").info(\"host event\")\n"
    )
    result = subprocess.run([sys.executable, "-c", code], capture_output=True, text=True, check=True)

    lines = result.stdout.splitlines()
    assert lines[0] == "False"
    assert any("host event" in line for line in lines[1:])


def test_runs_log_through_the_host_configuration() -> None:
    structlog.reset_defaults()
    try:
        with capture_logs() as captured:
            b = GraphBuilder()
            b.add_node(NodeKind.BEGIN_PLAY)
            b.add_node(NodeKind.BEGIN_PLAY)
            run_graph(b.build())
    finally:
        structlog.reset_defaults()

    assert any(e["event"] == "multiple entry nodes; using the first" for e in captured)
