import json

import pytest

from charger_uptime import render


def test_render_text():
    assert render.render([(0, 100), (1, 0), (4294967295, 66)]) == "0 100\n1 0\n4294967295 66\n"


def test_render_text_empty():
    assert render.render([]) == ""


def test_render_json():
    out = render.render([(2, 50), (7, 0)], "json")
    assert json.loads(out) == [
        {"station_id": 2, "uptime": 50},
        {"station_id": 7, "uptime": 0},
    ]


def test_render_unknown_format():
    with pytest.raises(ValueError):
        render.render([(1, 1)], "html")
