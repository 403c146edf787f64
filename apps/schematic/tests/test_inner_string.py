from apps.schematic.models import DrillPipeOptions
from apps.schematic.models.segment import DRILLPIPE, TUBING, InnerStringSection
from apps.schematic.services.inner_string import (
    bore_area,
    build_drill_pipe_string,
    compute_drill_pipe_breakdown,
    compute_upper_completion_breakdown,
    displacement_area,
    steel_area,
)
from apps.schematic.services.units import area_from_diameter_inches as area


def approx(a, b, tol=1e-9):
    return abs(a - b) <= tol


WELL = [
    {"role": "production", "id": 8.535, "top": 0, "depth": 3000},
    {"role": "reservoir", "id": 6.184, "top": 2800, "depth": 3500},
    {"role": "upper_completion", "id": 4.892, "od": 5.5, "top": 0, "depth": 3200},
]


def section(kind, **kwargs):
    defaults = {"label": "s", "top": 0.0, "bottom": 100.0, "od": 5.875, "id": 5.153}
    defaults.update(kwargs)
    return InnerStringSection(kind=kind, **defaults)


def test_upper_completion_rows_grouped_by_container():
    table = compute_upper_completion_breakdown(WELL)
    assert table["kind"] == TUBING
    assert table["shoe"] == 3200.0
    assert [(r["container"], r["depth"]) for r in table["sections"]] == [
        ("production", "0.0-2800.0"),
        ("reservoir", "2800.0-3200.0"),
    ]

    production, reservoir = table["sections"]
    assert approx(production["bore_volume"], area(4.892) * 2800)
    assert approx(production["annulus_volume"], (area(8.535) - area(5.5)) * 2800)
    assert approx(reservoir["annulus_volume"], (area(6.184) - area(5.5)) * 400)
    assert approx(production["bore_l_per_m"], area(4.892) * 1000)
    assert approx(table["total_length"], 3200.0)


def test_upper_completion_breakdown_without_string_is_empty():
    table = compute_upper_completion_breakdown(WELL[:2])
    assert table["sections"] == []
    assert table["total_bore_volume"] == 0.0


def test_drill_pipe_breakdown_uses_catalog_capacity():
    table = compute_drill_pipe_breakdown(
        {"mode": "drillpipe", "pipes": [{"size": 3, "length": 1000}]},
        WELL[:2],
    )
    assert table["kind"] == DRILLPIPE
    [row] = table["sections"]
    assert row["container"] == "production"
    assert approx(row["bore_volume"], 0.013128 * 1000)
    assert approx(row["bore_l_per_m"], 13.128)


def test_tubing_bore_prefers_id():
    tubing = section(TUBING, id=4.892, od=5.5, l_per_m=11.803)
    assert bore_area(tubing) == area(4.892)
    assert approx(bore_area(section(TUBING, id=None, od=5.5, l_per_m=11.803)), 0.011803)


def test_drill_pipe_bore_prefers_linear_capacity():
    pipe = section(DRILLPIPE, l_per_m=13.128)
    assert approx(bore_area(pipe), 0.013128)
    assert bore_area(section(DRILLPIPE, l_per_m=None)) == area(5.153)


def test_displacement_rules():
    tubing = section(TUBING, id=4.892, od=5.5, eod=2.0)
    assert approx(displacement_area(tubing, subtract_eod=True), 0.002)
    assert displacement_area(tubing, subtract_eod=False) == steel_area(tubing)

    pipe = section(DRILLPIPE, l_per_m=13.128, eod=4.739)
    assert approx(displacement_area(pipe, subtract_eod=False), 0.004739)
    assert approx(displacement_area(section(DRILLPIPE, l_per_m=13.128)), area(5.875) - 0.013128)


def test_drill_pipe_string_stacks_from_surface():
    options = DrillPipeOptions(mode="drillpipe", pipes=[
        {"size": 3, "length": 100},
        {"size": '4"', "length": "200"},
        {"size": 0, "length": 0},
    ])
    string = build_drill_pipe_string(options)
    assert [(s.label, s.top, s.bottom) for s in string.sections] == [
        ('5 7/8"', 0.0, 100.0),
        ('4"', 100.0, 300.0),
    ]
    assert string.shoe == 300.0
    assert string.sections[1].eod == 2.985


def test_drill_pipe_explicit_values_override_catalog():
    options = DrillPipeOptions(mode="drillpipe", pipes=[{"size": 3, "length": 10, "od": "6,0", "lPerM": 14}])
    [pipe] = build_drill_pipe_string(options).sections
    assert pipe.od == 6.0
    assert pipe.l_per_m == 14.0
    assert pipe.id == 5.153


def test_unknown_drill_pipe_size_warns():
    warnings = []
    options = DrillPipeOptions(mode="drillpipe", pipes=[{"size": '9"', "length": 10, "od": 5}])
    [pipe] = build_drill_pipe_string(options, warnings).sections
    assert pipe.label == "pipe[0]"
    assert warnings[0]["code"] == "DRILL_PIPE_SIZE_UNKNOWN"


def test_section_lookup_by_depth():
    options = DrillPipeOptions(mode="drillpipe", pipes=[{"size": 3, "length": 100}, {"size": 0, "length": 50}])
    string = build_drill_pipe_string(options)
    assert string.section_at(50).label == '5 7/8"'
    assert string.section_at(120).label == '2 7/8"'
    assert string.section_at(150) is None
