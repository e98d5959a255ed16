from climate_map_constants import MODE_SEA_LEVEL, MODE_TEMPERATURE, NO_DATA_TEXT
from climate_map_state import RenderState
from climate_map_tooltip import (
    describe_tooltip,
    display_name,
    format_value,
    render_tooltip,
    tooltip_html,
    tooltip_text,
)


class FakeContainer:
    def __init__(self):
        self.calls = []

    def markdown(self, body, unsafe_allow_html=False):
        self.calls.append(body)


def test_tooltip_for_computed_value():
    content = describe_tooltip({"ADMIN": "France", "value": 0.5}, RenderState(1990))
    assert content.name == "France"
    assert content.year == 1990
    assert content.label == "Temp Anomaly"
    assert content.value_text == "0.50"
    assert tooltip_text(content) == "France | Year: 1990 | Temp Anomaly: 0.50"


def test_tooltip_without_value():
    content = describe_tooltip({"NAME": "Italy", "value": None}, RenderState(1990))
    assert content.value_text == NO_DATA_TEXT
    assert describe_tooltip({"NAME": "Italy"}, RenderState(1990)).value_text == NO_DATA_TEXT


def test_tooltip_inactive_for_sea_level():
    assert describe_tooltip({"ADMIN": "France", "value": 0.5}, RenderState(1990, MODE_SEA_LEVEL)) is None


def test_tooltip_without_hover():
    assert describe_tooltip(None, RenderState(1990, MODE_TEMPERATURE)) is None
    assert tooltip_text(None) == ""


def test_display_name_priority():
    assert display_name({"NAME": "Deutschland", "ADMIN": "Germany"}) == "Germany"
    assert display_name({"Country": "  Chile "}) == "Chile"
    assert display_name({"ISO_A3": "NOR"}) == "NOR"
    assert display_name({}) == "Unknown"


def test_format_value():
    assert format_value(-0.333) == "-0.33"
    assert format_value("2") == "2.00"
    assert format_value(None) == NO_DATA_TEXT


def test_render_tooltip():
    container = FakeContainer()
    render_tooltip(container, None)
    assert container.calls == []

    content = describe_tooltip({"ADMIN": "France", "value": 0.5}, RenderState(1990))
    render_tooltip(container, content)
    assert container.calls == [tooltip_html(content)]
    assert "France" in container.calls[0]
