from __future__ import annotations

import math

import pytest

from shared_logic import (
    INFEASIBLE_RANGE,
    INVALID_ARRAY_DIMENSIONS,
    INVALID_DISPLAY_DIMENSIONS,
    INVALID_ORIENTATION,
    INVALID_WEIGHT,
    NO_RAIL_COMBINATION,
    RAIL_SPECS,
    UNSUPPORTED_BRACKET_CLASS,
    UNSUPPORTED_WEIGHT_CLASS,
    ConfigInputs,
    RailPart,
    RailSpec,
    calculate_configuration,
    find_best_rail_combination,
    is_valid_positive_integer,
    parse_int_field,
    resolve_geometry,
    segments_from_counts,
)


def make_inputs(**overrides) -> ConfigInputs:
    values = dict(
        rows=3,
        columns=3,
        display_width=1440,
        display_height=810,
        vesa_width=400,
        vesa_height=400,
        display_weight_kg=25,
        orientation="landscape",
    )
    values.update(overrides)
    return ConfigInputs(**values)


def brute_force_min_count(min_rail: int, max_rail: int) -> int | None:
    lengths = [r.length_mm for r in RAIL_SPECS]
    best = None
    for a in range(6):
        for b in range(7):
            for c in range(12):
                for d in range(17):
                    total = a * lengths[0] + b * lengths[1] + c * lengths[2] + d * lengths[3]
                    if min_rail <= total <= max_rail:
                        count = a + b + c + d
                        best = count if best is None else min(best, count)
    return best


def test_scenario_a_landscape_three_by_three() -> None:
    result, error = calculate_configuration(make_inputs())

    assert error is None
    assert result.min_rail == 3360
    assert result.max_rail == 4320
    assert result.selected_rail_segments == [1750, 1750]
    assert result.selected_rail_length == 3500
    assert result.rail_segments_per_row == 2
    assert result.rail_parts_per_row == [RailPart(1750, "ADB-R175", 2)]
    assert result.total_rails == [RailPart(1750, "ADB-R175", 6)]
    assert result.total_bracket_pairs == 9
    assert result.total_joiners == 3


def test_scenario_b_portrait_swaps_effective_size() -> None:
    result, error = calculate_configuration(make_inputs(orientation="portrait"))

    assert error is None
    assert result.effective_display_width == 810
    assert result.effective_display_height == 1440
    assert result.min_rail == 2100
    assert result.max_rail == 2430
    # 1750+480 and 1750+680 both need two segments; the shorter sum wins
    assert result.selected_rail_segments == [1750, 480]
    assert result.selected_rail_length == 2230


def test_scenario_c_single_column_uses_margin_only() -> None:
    result, error = calculate_configuration(make_inputs(columns=1, rows=2))

    assert error is None
    assert result.min_rail == 480
    assert result.max_rail == 1440
    assert result.selected_rail_segments == [480]
    assert result.total_joiners == 0
    assert result.total_bracket_pairs == 2
    assert result.total_rails == [RailPart(480, "ADB-R48", 2)]


@pytest.mark.parametrize(
    ("overrides", "code"),
    [
        ({"rows": 0}, INVALID_ARRAY_DIMENSIONS),
        ({"columns": None}, INVALID_ARRAY_DIMENSIONS),
        ({"columns": 2.5}, INVALID_ARRAY_DIMENSIONS),
        ({"display_width": 0}, INVALID_DISPLAY_DIMENSIONS),
        ({"vesa_height": float("nan")}, INVALID_DISPLAY_DIMENSIONS),
        ({"display_weight_kg": -1}, INVALID_WEIGHT),
        ({"display_weight_kg": math.inf}, INVALID_WEIGHT),
        ({"display_weight_kg": 51}, UNSUPPORTED_WEIGHT_CLASS),
        ({"vesa_height": 401}, UNSUPPORTED_BRACKET_CLASS),
        ({"orientation": "diagonal"}, INVALID_ORIENTATION),
        ({"columns": 1, "display_width": 400}, INFEASIBLE_RANGE),
    ],
)
def test_validation_errors(overrides, code) -> None:
    result, error = calculate_configuration(make_inputs(**overrides))

    assert result is None
    assert error.code == code
    assert error.message


def test_first_failing_rule_wins() -> None:
    _, error = calculate_configuration(make_inputs(rows=0, display_width=0, display_weight_kg=99))

    assert error.code == INVALID_ARRAY_DIMENSIONS


def test_weight_and_bracket_class_checked_regardless_of_geometry() -> None:
    _, weight_error = resolve_geometry(make_inputs(display_weight_kg=51, columns=1, display_width=100))
    _, bracket_error = resolve_geometry(make_inputs(vesa_height=401, columns=1, display_width=100))

    assert weight_error.code == UNSUPPORTED_WEIGHT_CLASS
    assert bracket_error.code == UNSUPPORTED_BRACKET_CLASS


def test_weight_limit_is_inclusive() -> None:
    _, error = calculate_configuration(make_inputs(display_weight_kg=50, vesa_height=400))

    assert error is None


def test_unreachable_range_reports_no_rail_combination() -> None:
    result, error = calculate_configuration(make_inputs(columns=1, display_width=679, vesa_width=401))

    assert result is None
    assert error.code == NO_RAIL_COMBINATION
    assert "481 mm" in error.message
    assert "679 mm" in error.message


def test_fewer_segments_beat_shorter_sum() -> None:
    combo = find_best_rail_combination(960, 1400)

    assert combo.segment_count == 1
    assert segments_from_counts(combo.counts) == [1250]


def test_equal_counts_prefer_smallest_sum() -> None:
    catalog = (RailSpec(600, "B"), RailSpec(500, "A"))

    combo = find_best_rail_combination(1000, 1200, catalog)

    assert combo.segment_count == 2
    assert segments_from_counts(combo.counts, catalog) == [500, 500]


def test_single_point_range() -> None:
    combo = find_best_rail_combination(1930, 1930)

    assert segments_from_counts(combo.counts) == [1250, 680]


def test_zero_in_range_yields_empty_combination() -> None:
    combo = find_best_rail_combination(0, 2000)

    assert combo.segment_count == 0
    assert combo.counts == [0, 0, 0, 0]


def test_below_smallest_segment_is_unreachable() -> None:
    assert find_best_rail_combination(1, 479) is None
    assert find_best_rail_combination(10, 5) is None


def test_optimizer_is_repeatable() -> None:
    first = find_best_rail_combination(3360, 4320)
    second = find_best_rail_combination(3360, 4320)

    assert first == second
    first.counts[0] = 99
    assert find_best_rail_combination(3360, 4320) == second


@pytest.mark.parametrize(
    ("min_rail", "max_rail"),
    [(480, 480), (1100, 1200), (2100, 2430), (3360, 4320), (5000, 5300), (7000, 7700)],
)
def test_segment_count_is_minimal(min_rail, max_rail) -> None:
    combo = find_best_rail_combination(min_rail, max_rail)
    total = sum(segments_from_counts(combo.counts))

    assert min_rail <= total <= max_rail
    assert combo.segment_count == brute_force_min_count(min_rail, max_rail)


def test_parse_int_field() -> None:
    assert parse_int_field("1440") == 1440
    assert parse_int_field(" 25 ") == 25
    assert parse_int_field(7) == 7
    assert parse_int_field("") is None
    assert parse_int_field("12.5") is None
    assert parse_int_field("-3") is None
    assert parse_int_field("\u0661\u0664\u0664\u0660") is None
    assert parse_int_field("\uff11\uff12") is None
    assert parse_int_field(None) is None


def test_positive_integer_rejects_bool_and_accepts_integral_float() -> None:
    assert is_valid_positive_integer(True) is False
    assert is_valid_positive_integer(3.0) is True
    assert is_valid_positive_integer(0) is False
