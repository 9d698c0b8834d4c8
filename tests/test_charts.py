"""Tests for bar chart geometry."""

from globetrotter.charts import BAR_GAP, BAR_WIDTH, bar_chart


def test_largest_value_fills_height():
    chart = bar_chart([{"label": "A", "value": 50}, {"label": "B", "value": 100}], height=200)
    a, b = chart["bars"]
    assert chart["max_value"] == 100
    assert b["height"] == 200
    assert b["y"] == 0
    assert a["height"] == 100
    assert a["y"] == 100


def test_bars_laid_out_left_to_right():
    chart = bar_chart([{"label": str(i), "value": i + 1} for i in range(3)])
    assert [b["x"] for b in chart["bars"]] == [0, BAR_WIDTH + BAR_GAP, 2 * (BAR_WIDTH + BAR_GAP)]
    assert chart["width"] == 3 * (BAR_WIDTH + BAR_GAP)
    assert all(b["width"] == BAR_WIDTH for b in chart["bars"])


def test_all_zero_series_has_flat_bars():
    chart = bar_chart([{"label": "A", "value": 0}, {"label": "B", "value": None}])
    assert [b["height"] for b in chart["bars"]] == [0, 0]
    assert all(b["y"] == chart["height"] for b in chart["bars"])


def test_empty_series():
    chart = bar_chart([])
    assert chart == {"width": 0, "height": 300, "max_value": 0, "bars": []}
