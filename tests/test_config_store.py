from __future__ import annotations

from config_store import default_config, dump_config_csv, inputs_from_config, load_config_csv


def test_config_csv_round_trip_keeps_text_fields() -> None:
    cfg = default_config()
    cfg["rows"] = "2"
    cfg["orientation"] = "portrait"

    loaded = load_config_csv(dump_config_csv(cfg), default_config())

    assert loaded == cfg


def test_load_skips_short_rows_and_keeps_raw_text() -> None:
    text = "rows,4\nlonely\nlayout_name,Lobby wall\n"

    loaded = load_config_csv(text, default_config())

    assert loaded["rows"] == 4
    assert loaded["layout_name"] == "Lobby wall"
    assert loaded["columns"] == "3"


def test_load_does_not_mutate_base() -> None:
    base = default_config()

    load_config_csv('rows,"""9"""\n', base)

    assert base == default_config()


def test_inputs_from_config_parses_text() -> None:
    cfg = default_config()
    cfg["display_width"] = "abc"

    inputs = inputs_from_config(cfg)

    assert inputs.rows == 3
    assert inputs.display_width is None
    assert inputs.display_weight_kg == 25
    assert inputs.orientation == "landscape"
