# config_store.py
import copy
import csv
import io
import json

from shared_logic import ConfigInputs, LANDSCAPE, parse_int_field

NUMERIC_FIELDS = [
    "rows", "columns",
    "display_width", "display_height",
    "vesa_width", "vesa_height",
    "display_weight_kg",
]

def default_config():
    return {
        "layout_name": "Video Wall 01",
        "region": "Australia",
        "orientation": LANDSCAPE,
        "rows": "3",
        "columns": "3",
        "display_width": "1440",
        "display_height": "810",
        "vesa_width": "400",
        "vesa_height": "400",
        "display_weight_kg": "25",
    }

def dump_config_csv(cfg) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf)
    for key in sorted(cfg.keys()):
        writer.writerow([key, json.dumps(cfg[key])])
    return buf.getvalue()

def load_config_csv(text, base):
    new_cfg = copy.deepcopy(base)
    reader = csv.reader(io.StringIO(text))
    for row in reader:
        if len(row) < 2:
            continue
        key, raw = row[0], row[1]
        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            value = raw
        new_cfg[key] = value
    return new_cfg

def inputs_from_config(cfg) -> ConfigInputs:
    values = {k: parse_int_field(cfg.get(k, "")) for k in NUMERIC_FIELDS}
    return ConfigInputs(orientation=str(cfg.get("orientation", LANDSCAPE)), **values)
