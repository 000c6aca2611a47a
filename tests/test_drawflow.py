import copy

import pytest

from lasrkit.drawflow import convert_value, is_number, parse_drawflow


def conn(node, side, port):
    return {"node": node, side: port}


DOCUMENT = {
    "drawflow": {
        "Home": {
            "data": {
                "1": {
                    "name": "processing_options",
                    "data": {"files": "tile.las", "ncores": "4", "progress": "true"},
                    "inputs": {},
                    "outputs": {},
                },
                "2": {
                    "name": "reader_las",
                    "data": {"filter": ""},
                    "inputs": {},
                    "outputs": {
                        "output_1": {
                            "connections": [conn("3", "output", "input_1"), conn("4", "output", "input_1")]
                        }
                    },
                },
                "3": {
                    "name": "triangulate",
                    "data": {"max_edge": "0"},
                    "inputs": {"input_1": {"connections": [conn("2", "input", "output_1")]}},
                    "outputs": {"output_1": {"connections": [conn("4", "output", "input_2")]}},
                },
                "4": {
                    "name": "rasterize",
                    "data": {"res": "1", "keep": "false"},
                    "inputs": {
                        "input_1": {"connections": [conn("2", "input", "output_1")]},
                        "input_2": {"connections": [conn("3", "input", "output_1")]},
                    },
                    "outputs": {},
                },
            }
        }
    }
}


def test_pipeline_order():
    result = parse_drawflow(copy.deepcopy(DOCUMENT))
    assert [stage["uid"] for stage in result["pipeline"]] == ["2", "3", "4"]
    assert [stage["algoname"] for stage in result["pipeline"]] == ["reader_las", "triangulate", "rasterize"]


def test_processing_options_converted():
    result = parse_drawflow(copy.deepcopy(DOCUMENT))
    assert result["processing"] == {"files": "tile.las", "ncores": 4.0, "progress": True}


def test_stage_data_and_second_input_connection():
    result = parse_drawflow(copy.deepcopy(DOCUMENT))
    rasterize = result["pipeline"][2]
    assert rasterize["res"] == 1.0
    assert rasterize["keep"] is False
    assert rasterize["connect"] == "3"
    assert "connect" not in result["pipeline"][1]
    assert result["pipeline"][0]["filter"] == ""


def test_input_document_is_not_modified():
    document = copy.deepcopy(DOCUMENT)
    parse_drawflow(document)
    assert document == DOCUMENT


def test_upstream_stages_come_first():
    document = copy.deepcopy(DOCUMENT)
    data = document["drawflow"]["Home"]["data"]
    renamed = {"9": data.pop("2")}
    data.update(renamed)
    for node in data.values():
        for ports in (node.get("inputs", {}), node.get("outputs", {})):
            for port in ports.values():
                for c in port["connections"]:
                    if c["node"] == "2":
                        c["node"] = "9"
    order = [stage["uid"] for stage in parse_drawflow(document)["pipeline"]]
    assert order.index("9") < order.index("3") < order.index("4")


@pytest.mark.parametrize(
    "document",
    [
        {},
        {"drawflow": []},
        {"drawflow": {}},
        {"drawflow": {"Home": {}}},
        {"drawflow": {"Home": {"data": []}}},
    ],
)
def test_malformed_structure(document):
    with pytest.raises(ValueError):
        parse_drawflow(document)


def test_missing_processing_options():
    document = copy.deepcopy(DOCUMENT)
    del document["drawflow"]["Home"]["data"]["1"]
    with pytest.raises(ValueError, match="Processing options"):
        parse_drawflow(document)


def test_missing_files():
    document = copy.deepcopy(DOCUMENT)
    del document["drawflow"]["Home"]["data"]["1"]["data"]["files"]
    with pytest.raises(ValueError, match="'files' is missing"):
        parse_drawflow(document)


@pytest.mark.parametrize(
    "value, expected",
    [("3.5", 3.5), ("12", 12.0), (" 7 ", 7.0), ("true", True), ("false", False), ("abc", "abc"), (5, 5)],
)
def test_convert_value(value, expected):
    assert convert_value(value) == expected
    assert type(convert_value(value)) is type(expected)


@pytest.mark.parametrize(
    "text, expected",
    [("1e3", True), ("-.5", True), ("2.", True), ("", False), ("1,5", False), ("12abc", False), ("true", False)],
)
def test_is_number(text, expected):
    assert is_number(text) is expected