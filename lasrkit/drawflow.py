"""Turn a Drawflow editor document into a linear processing pipeline."""

from __future__ import annotations

import re
from typing import Any

_NUMBER = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\s*")


def is_number(text: str) -> bool:
    """Tell whether the whole string, apart from surrounding blanks, is a number."""
    return _NUMBER.fullmatch(text) is not None


def convert_value(value: Any) -> Any:
    """Turn numeric strings into floats and "true"/"false" into booleans."""
    if isinstance(value, str):
        if is_number(value):
            return float(value)
        if value == "true":
            return True
        if value == "false":
            return False
    return value


def _topological_order(data: dict, start: str, visited: set[str], order: list[str]) -> None:
    visited.add(start)
    try:
        node = data[start]
    except KeyError:
        raise ValueError(f"connection to unknown node '{start}'") from None
    outputs = node.get("outputs") or {}
    for key in sorted(outputs):
        for connection in outputs[key].get("connections") or []:
            next_id = str(connection["node"])
            if next_id not in visited:
                _topological_order(data, next_id, visited, order)
    order.append(start)


def parse_drawflow(document: dict) -> dict:
    """Return ``{"processing": {...}, "pipeline": [...]}`` from a Drawflow export.

    The pipeline lists the stages so that each comes after the stages feeding
    it. Raises ValueError when the document lacks a required part.
    """
    drawflow = document.get("drawflow") if isinstance(document, dict) else None
    if not isinstance(drawflow, dict):
        raise ValueError("'drawflow' node is missing or is not an object")

    home = drawflow.get("Home")
    if not isinstance(home, dict):
        raise ValueError("'Home' node is missing or is not an object")

    raw = home.get("data")
    if not isinstance(raw, dict):
        raise ValueError("'data' node is missing or is not an object")

    data = dict(raw)

    options_id = next(
        (
            key
            for key in sorted(data)
            if isinstance(data[key], dict) and data[key].get("name") == "processing_options"
        ),
        None,
    )
    if options_id is None:
        raise ValueError("no 'Processing options' node")
    processing_options = data.pop(options_id)

    if "data" not in processing_options:
        raise ValueError("'processing_options' does not have any data")
    options_data = processing_options["data"]
    if "files" not in options_data:
        raise ValueError("Error in Processing Options: 'files' is missing")

    processing = {key: convert_value(value) for key, value in sorted(options_data.items())}

    order: list[str] = []
    visited: set[str] = set()
    for node_id in sorted(data):
        if node_id not in visited:
            _topological_order(data, node_id, visited, order)
    order.reverse()

    pipeline = []
    for node_id in order:
        node = data[node_id]
        stage: dict[str, Any] = {"uid": node_id, "algoname": node.get("name")}
        for key, value in sorted((node.get("data") or {}).items()):
            stage[key] = convert_value(value)

        inputs = node.get("inputs") or {}
        if len(inputs) > 1:
            for key in sorted(inputs)[1:]:
                for connection in inputs[key].get("connections") or []:
                    stage["connect"] = connection["node"]

        pipeline.append(stage)

    return {"processing": processing, "pipeline": pipeline}