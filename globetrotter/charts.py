"""Bar chart geometry for dashboard series.

Turns ``[{"label": ..., "value": ...}]`` into bar rectangles scaled so the
largest value fills the chart height. Clients only draw the rectangles.
"""

BAR_WIDTH = 40
BAR_GAP = 20
DEFAULT_HEIGHT = 300


def bar_chart(data: list[dict], height: int = DEFAULT_HEIGHT) -> dict:
    """Scale each value linearly against the series maximum.

    Bars sit on a shared baseline at ``y = height``. An empty or all-zero
    series produces zero-height bars.
    """
    values = [float(d.get("value") or 0) for d in data]
    max_value = max(values, default=0)
    bars = []
    for index, (item, value) in enumerate(zip(data, values)):
        bar_height = (value / max_value) * height if max_value > 0 else 0.0
        x = index * (BAR_WIDTH + BAR_GAP)
        bars.append({
            "label": item.get("label", ""),
            "value": value,
            "x": x,
            "y": height - bar_height,
            "width": BAR_WIDTH,
            "height": bar_height,
        })
    return {
        "width": len(data) * (BAR_WIDTH + BAR_GAP),
        "height": height,
        "max_value": max_value,
        "bars": bars,
    }
