#!/usr/bin/env python3
"""
01_sum_loop.py - A blueprint built in code and executed

Demonstrates:
- Building a graph with GraphBuilder (nodes, exec wires, data wires)
- ForLoop with Index feeding pure data nodes
- Variables read back after the loop completes
- Branch on a comparison result

Adds the integers 1..10 into a variable, then reports the total.
"""

from blueprintruntime import GraphBuilder, NodeKind, run_graph


def build():
    b = GraphBuilder()

    start = b.add_node(NodeKind.BEGIN_PLAY)
    zero = b.add_node(NodeKind.INTEGER_LITERAL, properties={"value": 0})
    init = b.add_node(NodeKind.SET_VARIABLE, properties={"name": "total"})
    loop = b.add_node(NodeKind.FOR_LOOP, properties={"start": 1, "end": 10, "step": 1})

    total = b.add_node(NodeKind.GET_VARIABLE, properties={"name": "total"})
    plus_index = b.add_node(NodeKind.ADD_INTEGER)
    accumulate = b.add_node(NodeKind.SET_VARIABLE, properties={"name": "total"})

    label = b.add_node(NodeKind.STRING_LITERAL, properties={"value": "Total: "})
    message = b.add_node(NodeKind.CONCAT_STRING)
    report = b.add_node(NodeKind.PRINT_STRING)

    fifty = b.add_node(NodeKind.INTEGER_LITERAL, properties={"value": 50})
    over_fifty = b.add_node(NodeKind.GREATER_THAN_INTEGER)
    check = b.add_node(NodeKind.BRANCH, title="Over fifty?")
    big = b.add_node(NodeKind.PRINT_STRING, properties={"text": "That's a lot."})
    small = b.add_node(NodeKind.PRINT_STRING, properties={"text": "That's not much."})

    # Control flow
    b.connect(start, "", init, "")
    b.connect(init, "", loop, "")
    b.connect(loop, "Loop Body", accumulate, "")
    b.connect(loop, "Completed", report, "")
    b.connect(report, "", check, "")
    b.connect(check, "True", big, "")
    b.connect(check, "False", small, "")

    # Data
    b.connect(zero, "Value", init, "Value")
    b.connect(total, "Value", plus_index, "A")
    b.connect(loop, "Index", plus_index, "B")
    b.connect(plus_index, "Result", accumulate, "Value")
    b.connect(label, "Value", message, "A")
    b.connect(total, "Value", message, "B")
    b.connect(message, "Result", report, "In String")
    b.connect(total, "Value", over_fifty, "A")
    b.connect(fifty, "Value", over_fifty, "B")
    b.connect(over_fifty, "Result", check, "Condition")

    return b.build()


def main() -> None:
    # Total: 55 / That's a lot. / --- / total: 55
    for line in run_graph(build()):
        print(line)


if __name__ == "__main__":
    main()
