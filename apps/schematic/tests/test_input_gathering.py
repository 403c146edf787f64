from apps.schematic.services.input_gathering import gather_segments
from apps.schematic.services.units import area_from_diameter_inches as area
from apps.schematic.services.volume_engine import compute_volumes


def approx(a, b, tol=1e-9):
    return abs(a - b) <= tol


FORM = {
    "riser": {"use": True, "type": "17.5", "depth": "450"},
    "surface": {"use": True, "size": "17.8", "depth": "1 200"},
    "production": {"use": True, "size": "8.535", "top": "", "depth": "3277,5"},
    "upper_completion": {"use": True, "top": "100"},
    "tubing": [{"size": 1, "length": "2838"}, {"size": 0, "length": "200"}],
    "open_hole": {"use": True, "size": "8.5", "depth": "3600"},
    "plug": {"enabled": True, "depth": "362"},
}


def by_role(gathered, role, index=0):
    return next(s for s in gathered.segments if s.role == role and s.index == index)


def test_surface_top_linked_to_riser_bottom():
    gathered = gather_segments(FORM)
    surface = by_role(gathered, "surface")
    assert surface.top == 450.0
    assert surface.depth == 1200.0
    assert surface.od == 18.625
    assert surface.drift == 17.168


def test_explicit_top_overrides_riser_link():
    form = dict(FORM, surface={"use": True, "size": "17.8", "top": "0", "depth": "1200"})
    assert by_role(gather_segments(form), "surface").top == 0.0


def test_riser_type_none_disables_riser():
    form = dict(FORM, riser={"use": True, "type": "none", "depth": "450"})
    gathered = gather_segments(form)
    riser = by_role(gathered, "riser")
    assert riser.use is False
    assert riser.od == 0.0
    assert by_role(gathered, "surface").top is None


def test_production_numbers_and_catalog_defaults():
    production = by_role(gather_segments(FORM), "production")
    assert production.depth == 3277.5
    assert production.top is None
    assert production.drift == 8.508
    assert production.od == 9.625


def test_tapered_tubing_sections_accumulate_tops():
    gathered = gather_segments(FORM)
    upper, lower = by_role(gathered, "upper_completion", 0), by_role(gathered, "upper_completion", 1)
    assert (upper.top, upper.depth, upper.id, upper.od) == (100.0, 2938.0, 4.892, 5.5)
    assert upper.tj == 6.098
    assert (lower.top, lower.depth, lower.id, lower.od) == (2938.0, 3138.0, 3.958, 4.5)
    assert lower.l_per_m == 9.728


def test_single_upper_completion_block():
    form = dict(FORM, upper_completion={"use": True, "size": "4.892", "depth": "2838"})
    form.pop("tubing")
    upper = by_role(gather_segments(form), "upper_completion")
    assert (upper.id, upper.od, upper.depth, upper.tj) == (4.892, 5.5, 2838.0, 6.098)


def test_options_from_form():
    options = gather_segments(FORM).options
    assert options.plug_active
    assert options.plug_depth_val == 362.0
    assert options.surface_in_use is True
    assert options.intermediate_in_use is False
    assert options.subtract_eod is True
    assert options.drill_pipe is None

    form = dict(FORM, subtract_eod="false", drill_pipe={"mode": "drillpipe", "pipes": [{"size": 3, "length": 362}]})
    options = gather_segments(form).options
    assert options.subtract_eod is False
    assert options.dp_requested


def test_open_hole_links_to_deepest_shoe():
    gathered = gather_segments(FORM)
    assert gathered.open_hole_top == 3277.5
    assert by_role(gathered, "open_hole").top is None

    result = compute_volumes(gathered.segments, gathered.options)
    assert not [w for w in result.warnings if w["code"] == "OD_BELOW_ID"]
    assert approx(result.volume_for("open_hole"), area(8.5) * (3600 - 3277.5))
    assert result.uc_active is True
    assert result.string_crosses_poi is True


def test_missing_blocks_are_skipped():
    gathered = gather_segments({"production": {"use": True, "size": "8.535", "depth": "1000"}})
    assert [s.role for s in gathered.segments] == ["production"]
    assert gathered.to_dict()["segments"][0]["depth"] == 1000.0
