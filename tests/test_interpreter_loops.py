from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from blueprintruntime import EngineConfig, Graph, GraphBuilder, Node, NodeKind, run_graph


def _for_loop_graph(properties: Dict[str, Any]) -> Tuple[GraphBuilder, Node]:
    """BeginPlay -> ForLoop; body prints the index, Completed prints "done"."""
    b = GraphBuilder()
    start = b.add_node(NodeKind.BEGIN_PLAY)
    loop = b.add_node(NodeKind.FOR_LOOP, properties=properties)
    index_text = b.add_node(NodeKind.TO_STRING)
    body = b.add_node(NodeKind.PRINT_STRING)
    done = b.add_node(NodeKind.PRINT_STRING, properties={"text": "done"})
    b.connect(start, "", loop, "")
    b.connect(loop, "Index", index_text, "Value")
    b.connect(index_text, "Result", body, "In String")
    b.connect(loop, "Loop Body", body, "")
    b.connect(loop, "Completed", done, "")
    return b, loop


def _run_for(properties: Dict[str, Any], config: Optional[EngineConfig] = None) -> list:
    b, _ = _for_loop_graph(properties)
    return run_graph(b.build(), config=config)


def test_for_loop_visits_body_once_per_index_then_completes_once() -> None:
    lines = _run_for({"start": 0, "end": 4, "step": 1})

    assert lines == ["0", "1", "2", "3", "4", "done", "---", "  (no variables)"]


def test_for_loop_bounds_can_come_from_wired_pins() -> None:
    b = GraphBuilder()
    start = b.add_node(NodeKind.BEGIN_PLAY)
    loop = b.add_node(NodeKind.FOR_LOOP, properties={"start": 100, "end": 100})
    lo = b.add_node(NodeKind.STRING_LITERAL, properties={"value": "2"})
    hi = b.add_node(NodeKind.FLOAT_LITERAL, properties={"value": 4.9})
    index_text = b.add_node(NodeKind.TO_STRING)
    body = b.add_node(NodeKind.PRINT_STRING)
    b.connect(start, "", loop, "")
    b.connect(lo, "Value", loop, "Start")
    b.connect(hi, "Value", loop, "End")
    b.connect(loop, "Index", index_text, "Value")
    b.connect(index_text, "Result", body, "In String")
    b.connect(loop, "Loop Body", body, "")

    # Wired pins win over properties; bounds are truncated toward zero.
    assert run_graph(b.build())[:3] == ["2", "3", "4"]


def test_for_loop_counts_down_when_start_is_above_end() -> None:
    lines = _run_for({"start": 3, "end": 1, "step": 1})

    assert lines[:4] == ["3", "2", "1", "done"]


def test_for_loop_step_sign_is_normalized_to_direction() -> None:
    lines = _run_for({"start": 0, "end": 4, "step": -2})

    assert lines[:4] == ["0", "2", "4", "done"]
    assert not any(line.startswith("Warning") for line in lines)


def test_for_loop_zero_step_warns_once_and_counts_up() -> None:
    lines = _run_for({"start": 0, "end": 2, "step": 0})

    warnings = [line for line in lines if line.startswith("Warning")]
    assert warnings == ["Warning: For Loop [ForLoop] Step must be a non-zero integer but received 0. Using 1."]
    assert lines[1:5] == ["0", "1", "2", "done"]


def test_for_loop_zero_step_counts_down_when_start_above_end() -> None:
    lines = _run_for({"start": 2, "end": 0, "step": 0})

    assert lines[0].endswith("Using -1.")
    assert lines[1:5] == ["2", "1", "0", "done"]


def test_for_loop_missing_step_defaults_to_one_silently() -> None:
    lines = _run_for({"start": 1, "end": 2, "step": None})

    assert lines[:3] == ["1", "2", "done"]


def test_for_loop_invalid_bounds_warn_and_complete_immediately() -> None:
    lines = _run_for({"start": "abc", "end": 3})

    assert lines == [
        "Warning: For Loop [ForLoop] received invalid Start/End values abc and 3. Skipping loop.",
        "done",
        "---",
        "  (no variables)",
    ]


def test_for_loop_single_iteration_when_start_equals_end() -> None:
    assert _run_for({"start": 7, "end": 7})[:2] == ["7", "done"]


def test_for_loop_iteration_cap_aborts_loop_and_continues_with_completed() -> None:
    lines = _run_for({"start": 0, "end": 100}, config=EngineConfig(max_loop_iterations=3))

    assert lines == [
        "0",
        "1",
        "2",
        "Error: For Loop [ForLoop] exceeded 3 iterations. Loop aborted.",
        "done",
        "---",
        "  (no variables)",
    ]


def test_for_loop_index_is_zero_when_loop_is_not_active() -> None:
    b = GraphBuilder()
    start = b.add_node(NodeKind.BEGIN_PLAY)
    loop = b.add_node(NodeKind.FOR_LOOP, properties={"start": 5, "end": 6})
    index_text = b.add_node(NodeKind.TO_STRING)
    after = b.add_node(NodeKind.PRINT_STRING)
    b.connect(start, "", loop, "")
    b.connect(loop, "Index", index_text, "Value")
    b.connect(index_text, "Result", after, "In String")
    b.connect(loop, "Completed", after, "")

    assert run_graph(b.build())[0] == "0"


def _accumulate_graph() -> Graph:
    """sum = 0; for i in 1..4: sum = sum + i"""
    b = GraphBuilder()
    start = b.add_node(NodeKind.BEGIN_PLAY)
    zero = b.add_node(NodeKind.INTEGER_LITERAL, properties={"value": 0})
    init = b.add_node(NodeKind.SET_VARIABLE, properties={"name": "sum"})
    loop = b.add_node(NodeKind.FOR_LOOP, properties={"start": 1, "end": 4, "step": 1})
    get_sum = b.add_node(NodeKind.GET_VARIABLE, properties={"name": "sum"})
    add = b.add_node(NodeKind.ADD_INTEGER)
    update = b.add_node(NodeKind.SET_VARIABLE, properties={"name": "sum"})
    b.connect(zero, "Value", init, "Value")
    b.connect(start, "", init, "")
    b.connect(init, "", loop, "")
    b.connect(get_sum, "Value", add, "A")
    b.connect(loop, "Index", add, "B")
    b.connect(add, "Result", update, "Value")
    b.connect(loop, "Loop Body", update, "")
    return b.build()


def test_for_loop_body_sees_fresh_values_every_iteration() -> None:
    assert run_graph(_accumulate_graph()) == ["---", "  sum: 10"]


def test_for_loop_iterations_interleave_with_queued_work_in_fifo_order() -> None:
    b = GraphBuilder()
    start = b.add_node(NodeKind.BEGIN_PLAY)
    seq = b.add_node(NodeKind.SEQUENCE)
    loop = b.add_node(NodeKind.FOR_LOOP, properties={"start": 0, "end": 1})
    index_text = b.add_node(NodeKind.TO_STRING)
    body = b.add_node(NodeKind.PRINT_STRING)
    after = b.add_node(NodeKind.PRINT_STRING, properties={"text": "after"})
    b.connect(start, "", seq, "")
    b.connect(seq, "Then 0", loop, "")
    b.connect(seq, "Then 1", after, "")
    b.connect(loop, "Index", index_text, "Value")
    b.connect(index_text, "Result", body, "In String")
    b.connect(loop, "Loop Body", body, "")

    # "after" was queued before the first body visit, so it runs first.
    assert run_graph(b.build())[:3] == ["after", "0", "1"]


def _while_counter_graph(limit: int) -> Graph:
    """i = 0; while i < limit: i = i + 1; then print "done"."""
    b = GraphBuilder()
    start = b.add_node(NodeKind.BEGIN_PLAY)
    zero = b.add_node(NodeKind.INTEGER_LITERAL, properties={"value": 0})
    one = b.add_node(NodeKind.INTEGER_LITERAL, properties={"value": 1})
    bound = b.add_node(NodeKind.INTEGER_LITERAL, properties={"value": limit})
    init = b.add_node(NodeKind.SET_VARIABLE, properties={"name": "i"})
    loop = b.add_node(NodeKind.WHILE_LOOP)
    get_i = b.add_node(NodeKind.GET_VARIABLE, properties={"name": "i"})
    less = b.add_node(NodeKind.LESS_THAN_INTEGER)
    add = b.add_node(NodeKind.ADD_INTEGER)
    step = b.add_node(NodeKind.SET_VARIABLE, properties={"name": "i"})
    done = b.add_node(NodeKind.PRINT_STRING, properties={"text": "done"})
    b.connect(zero, "Value", init, "Value")
    b.connect(get_i, "Value", less, "A")
    b.connect(bound, "Value", less, "B")
    b.connect(less, "Result", loop, "Condition")
    b.connect(get_i, "Value", add, "A")
    b.connect(one, "Value", add, "B")
    b.connect(add, "Result", step, "Value")
    b.connect(start, "", init, "")
    b.connect(init, "", loop, "")
    b.connect(loop, "Loop Body", step, "")
    b.connect(loop, "Completed", done, "")
    return b.build()


def test_while_loop_runs_until_condition_is_false() -> None:
    assert run_graph(_while_counter_graph(3)) == ["done", "---", "  i: 3"]


def test_while_loop_with_false_condition_completes_immediately() -> None:
    assert run_graph(_while_counter_graph(0)) == ["done", "---", "  i: 0"]


def test_while_loop_iteration_cap_aborts_and_follows_completed() -> None:
    b = GraphBuilder()
    start = b.add_node(NodeKind.BEGIN_PLAY)
    forever = b.add_node(NodeKind.BOOLEAN_LITERAL, properties={"value": True})
    loop = b.add_node(NodeKind.WHILE_LOOP, title="Spin")
    body = b.add_node(NodeKind.PRINT_STRING, properties={"text": "x"})
    done = b.add_node(NodeKind.PRINT_STRING, properties={"text": "done"})
    b.connect(start, "", loop, "")
    b.connect(forever, "Value", loop, "Condition")
    b.connect(loop, "Loop Body", body, "")
    b.connect(loop, "Completed", done, "")

    lines = run_graph(b.build(), config=EngineConfig(max_loop_iterations=5))

    assert lines == ["x"] * 5 + [
        "Error: Spin [WhileLoop] exceeded 5 iterations. Loop aborted.",
        "done",
        "---",
        "  (no variables)",
    ]


def test_global_step_cap_trips_before_default_loop_cap_on_long_loops() -> None:
    b = GraphBuilder()
    start = b.add_node(NodeKind.BEGIN_PLAY)
    loop = b.add_node(NodeKind.FOR_LOOP, properties={"start": 0, "end": 5000})
    b.connect(start, "", loop, "")

    # Empty body: only the loop node itself is dequeued, one step per iteration.
    lines = run_graph(b.build())

    assert lines == [
        "Error: Maximum execution limit reached. Possible infinite loop.",
        "---",
        "  (no variables)",
    ]
