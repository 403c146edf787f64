import pytest

from apps.schematic.services.units import area_from_diameter_inches as area
from apps.schematic.services.units import steel_cross_section_area
from apps.schematic.services.volume_engine import compute_volumes


def approx(a, b, tol=1e-9):
    return abs(a - b) <= tol


PRODUCTION_20 = {"role": "production", "id": 20, "od": 21, "top": 0, "depth": 4000}


def tubing(depth, top=0):
    return {"role": "upper_completion", "id": 4.892, "od": 5.5, "top": top, "depth": depth}


def plug(depth):
    return {"plugEnabled": True, "plugDepthVal": depth}


# -----------------------------
# POI without an inner string
# -----------------------------
def test_poi_split_single_segment():
    result = compute_volumes([{"role": "production", "id": 10, "depth": 100}], plug(30))
    assert result.plug_above_volume == area(10) * 30
    assert result.plug_above_volume + result.plug_below_volume == pytest.approx(result.total_volume, rel=1e-12)
    assert approx(result.plug_below_volume, area(10) * 70)


def test_poi_split_cuts_straddling_spans():
    segments = [
        {"role": "riser", "id": 17.5, "depth": 100},
        {"role": "production", "id": 8.535, "depth": 600},
    ]
    result = compute_volumes(segments, plug(250))
    assert approx(result.plug_above_volume, area(17.5) * 100 + area(8.535) * 150)
    assert approx(result.plug_below_volume, area(8.535) * 350)
    assert result.plug_above_volume + result.plug_below_volume == pytest.approx(result.total_volume, rel=1e-12)


def test_plug_disabled_leaves_plug_fields_zero():
    result = compute_volumes([{"role": "production", "id": 10, "depth": 100}], {"plugDepthVal": 30})
    assert result.plug_above_volume == 0.0
    assert result.plug_below_volume == 0.0
    assert result.string_crosses_poi is False


def test_plug_enabled_without_depth_is_inactive():
    result = compute_volumes([{"role": "production", "id": 10, "depth": 100}], {"plug_enabled": True, "plug_depth_val": "n/a"})
    assert result.plug_depth_val is None
    assert result.plug_above_volume == 0.0


# -----------------------------
# Tubing (upper completion)
# -----------------------------
def test_crossing_string_is_continuous_at_poi_and_shoe():
    # shoe at 2838 + 362 = 3200 inside a 20" ID production casing, POI at 362
    result = compute_volumes([PRODUCTION_20, tubing(3200)], plug(362))
    steel = steel_cross_section_area(5.5, 4.892)

    assert result.uc_active is True
    assert result.string_crosses_poi is True

    assert approx(result.plug_below_tubing, area(4.892) * 2838, tol=1e-9)
    assert approx(result.plug_below_annulus, (area(20) - area(5.5)) * 2838, tol=1e-9)
    assert approx(result.plug_below_tubing_open_casing, area(20) * 800, tol=1e-9)
    assert approx(result.casing_volume_below_tubing_shoe, area(20) * 800, tol=1e-9)

    fluid_below = result.plug_below_tubing + result.plug_below_annulus + result.plug_below_tubing_open_casing
    assert approx(result.plug_below_volume, fluid_below, tol=1e-9)
    # Adding the steel back gives the full casing volume below the POI: no gap, no double count
    assert approx(fluid_below + steel * 2838, area(20) * (4000 - 362), tol=1e-9)

    assert approx(result.plug_above_tubing, area(4.892) * 362, tol=1e-9)
    assert result.plug_above_tubing_open_casing == 0.0
    # Tubing does not change the gross casing total
    assert approx(result.total_volume, area(20) * 4000, tol=1e-9)


def test_string_entirely_above_poi():
    result = compute_volumes([dict(PRODUCTION_20, depth=1000), tubing(300)], plug(362))
    assert result.string_crosses_poi is False
    assert result.plug_below_tubing == 0.0
    assert result.plug_below_annulus == 0.0
    assert approx(result.plug_above_tubing_open_casing, area(20) * 62, tol=1e-9)
    assert approx(result.plug_below_tubing_open_casing, area(20) * 638, tol=1e-9)
    assert approx(result.plug_below_volume, area(20) * 638, tol=1e-9)
    assert approx(result.casing_volume_below_tubing_shoe, area(20) * 700, tol=1e-9)


def test_tubing_steel_reduces_below_poi_volume():
    casing = dict(PRODUCTION_20, depth=1000)
    short = compute_volumes([casing, tubing(434)], plug(362))
    long = compute_volumes([casing, tubing(600)], plug(362))
    steel = steel_cross_section_area(5.5, 4.892)
    assert approx(short.plug_below_volume - long.plug_below_volume, steel * 166, tol=1e-9)
    assert short.plug_below_volume_tubing == short.plug_below_volume


def test_tubing_below_riser_counts_bore_on_both_sides():
    segments = [
        {"role": "riser", "id": 20, "depth": 400},
        tubing(2000, top=100),
    ]
    result = compute_volumes(segments, plug(500))
    assert result.plug_above_tubing > 0
    assert result.plug_below_tubing > 0
    assert approx(result.plug_below_tubing, area(4.892) * 1500, tol=1e-9)
    # No casing below 400 m: no annulus there
    assert result.plug_below_annulus == 0.0


def test_tubing_eod_replaces_steel_when_enabled():
    casing = dict(PRODUCTION_20, depth=1000)
    section = dict(tubing(600), eod=2.0)
    with_eod = compute_volumes([casing, section], plug(362))
    without = compute_volumes([casing, section], dict(plug(362), subtractEod=False))
    assert approx(with_eod.plug_below_volume, area(20) * 638 - 0.002 * 238, tol=1e-9)
    assert approx(without.plug_below_volume, area(20) * 638 - steel_cross_section_area(5.5, 4.892) * 238, tol=1e-9)


def test_tubing_given_by_linear_capacity_only():
    segments = [
        {"role": "production", "id": 8.535, "top": 0, "depth": 3000},
        {"role": "upper_completion", "lPerM": 11.803, "od": 5.5, "top": 0, "depth": 2000},
    ]
    result = compute_volumes(segments, plug(1000))
    assert result.uc_active is True
    assert result.string_crosses_poi is True
    assert approx(result.plug_above_tubing, 0.011803 * 1000, tol=1e-9)
    assert approx(result.plug_below_tubing, 0.011803 * 1000, tol=1e-9)
    assert approx(result.plug_above_annulus, (area(8.535) - area(5.5)) * 1000, tol=1e-9)
    steel = area(5.5) - 0.011803
    assert approx(result.plug_below_volume, area(8.535) * 2000 - steel * 1000, tol=1e-9)
    assert not [w for w in result.warnings if w["code"] in ("MISSING_FIELD", "OD_BELOW_ID")]


# -----------------------------
# Drill pipe
# -----------------------------
def test_drill_pipe_mode_subtracts_open_ended_displacement():
    segments = [{"role": "production", "id": 8.535, "depth": 3000}]
    options = dict(plug(362), drillPipe={"mode": "drillpipe", "pipes": [{"size": 3, "length": 362}]})
    result = compute_volumes(segments, options)

    assert result.dp_mode is True
    assert result.dp_total_depth == 362.0
    assert result.string_crosses_poi is False
    assert approx(result.plug_above_drillpipe, 0.013128 * 362, tol=1e-9)
    assert approx(result.plug_above_drillpipe_annulus, (area(8.535) - area(5.875)) * 362, tol=1e-9)
    assert result.plug_below_drillpipe == 0.0
    assert approx(result.total_volume, area(8.535) * 3000 - 0.004739 * 362, tol=1e-9)
    assert approx(result.plug_above_volume, area(8.535) * 362 - 0.004739 * 362, tol=1e-9)
    assert approx(result.plug_below_volume, area(8.535) * 2638, tol=1e-9)


def test_drill_pipe_without_eod_subtraction():
    segments = [{"role": "production", "id": 8.535, "depth": 3000}]
    options = {"drill_pipe": {"mode": "drillpipe", "pipes": [{"size": 3, "length": 362}]}, "subtract_eod": False}
    result = compute_volumes(segments, options)
    assert result.dp_mode is True
    assert approx(result.total_volume, area(8.535) * 3000, tol=1e-9)


def test_drill_pipe_annulus_follows_ownership():
    segments = [
        {"role": "riser", "id": 13.5, "depth": 450},
        {"role": "intermediate", "id": 11.0, "top": 300, "depth": 450},
    ]
    options = dict(plug(362), drillPipe={"mode": "drillpipe", "pipes": [{"length": 362, "lPerM": 13.1, "od": 5.875}]})
    result = compute_volumes(segments, options)

    assert approx(result.plug_above_drillpipe, 0.0131 * 362, tol=1e-9)
    expected_annulus = (area(13.5) - area(5.875)) * 300 + (area(11.0) - area(5.875)) * 62
    assert approx(result.plug_above_drillpipe_annulus, expected_annulus, tol=1e-9)
    assert approx(result.plug_below_drillpipe_open_casing, area(11.0) * 88, tol=1e-9)
    # No eod given: the steel wall is what gets displaced
    steel = area(5.875) - 0.0131
    assert approx(result.plug_above_volume, area(13.5) * 300 + area(11.0) * 62 - steel * 362, tol=1e-9)


def test_tubing_mode_ignores_drill_pipe_list():
    segments = [{"role": "production", "id": 8.535, "depth": 3000}]
    options = {"drillPipe": {"mode": "tubing", "pipes": [{"size": 3, "length": 362}]}}
    result = compute_volumes(segments, options)
    assert result.dp_mode is False
    assert result.dp_total_depth == 0.0


def test_drill_pipe_without_od_has_no_annulus():
    segments = [{"role": "production", "id": 8.535, "depth": 3000}]
    options = dict(plug(1000), drillPipe={"mode": "drillpipe", "pipes": [{"length": 500, "lPerM": 9.0}]})
    result = compute_volumes(segments, options)
    assert approx(result.plug_above_drillpipe, 4.5, tol=1e-9)
    assert result.plug_above_drillpipe_annulus == 0.0
    # Bore plus the casing left open never exceeds the casing volume above the POI
    assert approx(result.plug_above_drillpipe_open_casing, area(8.535) * 500, tol=1e-9)
    assert result.plug_above_drillpipe + result.plug_above_drillpipe_open_casing < area(8.535) * 1000
    assert [w["code"] for w in result.warnings] == ["STRING_OD_MISSING"]


# -----------------------------
# Drawing, warnings, serialization
# -----------------------------
def test_casings_to_draw_order():
    segments = [
        {"role": "conductor", "id": 28, "od": 30, "depth": 60},
        {"role": "surface", "id": 17.8, "od": 18.625, "depth": 600},
        {"role": "production", "id": 8.535, "od": 9.625, "top": 0, "depth": 3000},
        tubing(2500),
        {"role": "open_hole", "id": 8.5, "depth": 3400},
    ]
    result = compute_volumes(segments)
    assert [e.role for e in result.casings_to_draw] == [
        "open_hole", "conductor", "surface", "production", "upper_completion",
    ]
    open_hole = result.casings_to_draw[0]
    assert (open_hole.z, open_hole.prev_depth, open_hole.depth) == (-2, 3000.0, 3400.0)


def test_draw_order_ties_break_on_depth_then_width():
    segments = [
        {"role": "production", "id": 8.535, "od": 9.625, "top": 500, "depth": 3000},
        {"role": "tieback", "id": 8.921, "od": 9.625, "top": 0, "depth": 500},
    ]
    result = compute_volumes(segments)
    assert [e.role for e in result.casings_to_draw] == ["tieback", "production"]


def test_upper_completion_drift_warning():
    segments = [
        {"role": "reservoir", "id": 4.778, "od": 5.5, "top": 0, "depth": 1200},
        tubing(1000),
    ]
    result = compute_volumes(segments)
    fit = [w for w in result.warnings if w["code"] == "UC_DRIFT_FIT"]
    assert len(fit) == 1
    assert fit[0]["context"]["drift"] == 4.653
    assert fit[0]["context"]["tj"] == 6.098


def test_upper_completion_fits_explicit_drift():
    segments = [
        {"role": "production", "id": 8.535, "drift": 8.508, "depth": 3000},
        tubing(1000),
    ]
    result = compute_volumes(segments)
    assert not [w for w in result.warnings if w["code"] == "UC_DRIFT_FIT"]


def test_result_to_dict_is_plain_data():
    result = compute_volumes([PRODUCTION_20, tubing(3200)], plug(362)).to_dict()
    assert result["uc_active"] is True
    assert result["plug_depth_val"] == 362.0
    assert isinstance(result["per_casing_volumes"][0], dict)
    assert isinstance(result["casings_to_draw"][0], dict)


def test_malformed_input_never_raises():
    segments = [
        None,
        {"role": "production"},
        {"role": "reservoir", "id": "x", "depth": "y", "top": "z"},
        {"role": "upper_completion", "id": 4.892, "depth": None},
    ]
    result = compute_volumes(segments, {"plugEnabled": "yes", "plugDepthVal": "12,5", "drillPipe": "junk"})
    assert result.total_volume == 0.0
    assert result.plug_depth_val == 12.5
