# products.py
import logging
import os
from dataclasses import dataclass, replace
from typing import Dict, List, Optional

import pandas as pd

from shared_logic import CalculationResult, RAIL_SPECS

logger = logging.getLogger(__name__)

BRACKET_PAIR_SKU = "ADB-B400"
RAIL_JOINER_SKU = "ADB-RX"

REGIONS = ["Australia", "North America"]
BOM_COLUMNS = ["Product code", "Product description", "QTY", "Buy link"]

@dataclass(frozen=True)
class ProductRecord:
    code: str
    description: str
    au_url: str = ""
    na_url: str = ""

    def url_for_region(self, region: str) -> str:
        return self.na_url if str(region).strip().lower() == "north america" else self.au_url

PRODUCT_MASTER: Dict[str, ProductRecord] = {
    "ADB-B400": ProductRecord("ADB-B400", "ADB VESA 400 Brackets", "http://atdec.com.au/adb-b400f", "http://atdec.com/adb-b400f"),
    "ADB-R48": ProductRecord("ADB-R48", "ADB 480mm Rail", "http://atdec.com.au/adb-r48-b", "http://atdec.com/adb-r48-b"),
    "ADB-R68": ProductRecord("ADB-R68", "ADB 680mm Rail", "http://atdec.com.au/adb-r68-b", "http://atdec.com/adb-r68-b"),
    "ADB-R125": ProductRecord("ADB-R125", "ADB 1250mm Rail", "http://atdec.com.au/adb-r125-b", "http://atdec.com/adb-r125-b"),
    "ADB-R175": ProductRecord("ADB-R175", "ADB 1750mm Rail", "http://atdec.com.au/adb-r175-b", "http://atdec.com/adb-r175-b"),
    "ADB-RX": ProductRecord("ADB-RX", "ADB Rail Extension Kit", "http://atdec.com.au/adb-rx", "http://atdec.com/adb-rx"),
}

RAIL_SEGMENT_COLORS = {
    480: "#2a9d8f",
    680: "#f4a261",
    1250: "#e76f51",
    1750: "#457b9d",
}

# size label -> display width, height, VESA width, VESA height (mm), weight (kg)
DISPLAY_PRESETS = [
    {"size": "43\"", "display_width": 953, "display_height": 536, "vesa_width": 400, "vesa_height": 400, "display_weight_kg": 15},
    {"size": "50\"", "display_width": 1107, "display_height": 622, "vesa_width": 400, "vesa_height": 400, "display_weight_kg": 20},
    {"size": "55\"", "display_width": 1217, "display_height": 686, "vesa_width": 400, "vesa_height": 400, "display_weight_kg": 25},
    {"size": "65\"", "display_width": 1440, "display_height": 810, "vesa_width": 400, "vesa_height": 400, "display_weight_kg": 35},
    {"size": "75\"", "display_width": 1661, "display_height": 935, "vesa_width": 400, "vesa_height": 400, "display_weight_kg": 45},
    {"size": "85\"", "display_width": 1882, "display_height": 1059, "vesa_width": 400, "vesa_height": 400, "display_weight_kg": 50},
    {"size": "98\"", "display_width": 2169, "display_height": 1219, "vesa_width": 400, "vesa_height": 400, "display_weight_kg": 60},
]

def preset_label(preset) -> str:
    return (
        f"{preset['size']} • {preset['display_width']} x {preset['display_height']} mm • "
        f"VESA {preset['vesa_width']} x {preset['vesa_height']} • {preset['display_weight_kg']} kg"
    )

def _col_name(df, target):
    target_low = str(target).strip().lower()
    for col in df.columns:
        if str(col).strip().lower() == target_low:
            return col
    return None

def _read_table(path):
    if str(path).lower().endswith(".csv"):
        return pd.read_csv(path, dtype=str)
    xls = pd.ExcelFile(path)
    for sheet in xls.sheet_names:
        df = pd.read_excel(xls, sheet_name=sheet, dtype=str)
        if _col_name(df, "Code") is not None and _col_name(df, "Description") is not None:
            return df
    raise ValueError("No sheet with columns Code/Description found")

def load_product_master(path: Optional[str]) -> Dict[str, ProductRecord]:
    """
    Built-in product master, overlaid with rows from an optional .xlsx/.csv file.
    Rows with a known code update that product (blank cells keep the built-in
    value); unknown codes are added.
    """
    products = dict(PRODUCT_MASTER)
    if not path or not os.path.exists(path):
        return products

    try:
        df = _read_table(path).fillna("")
    except Exception as e:
        raise ValueError(f"Could not read product master {path}: {e}") from e
    c_code = _col_name(df, "Code")
    c_desc = _col_name(df, "Description")
    if c_code is None or c_desc is None:
        raise ValueError(f"{path} needs Code and Description columns")
    c_au = _col_name(df, "AU URL")
    c_na = _col_name(df, "NA URL")

    for _, row in df.iterrows():
        code = str(row[c_code]).strip()
        if not code:
            continue
        fields = {
            "description": str(row[c_desc]).strip(),
            "au_url": str(row[c_au]).strip() if c_au else "",
            "na_url": str(row[c_na]).strip() if c_na else "",
        }
        if code in products:
            products[code] = replace(products[code], **{k: v for k, v in fields.items() if v})
        else:
            products[code] = ProductRecord(code, fields["description"] or code, fields["au_url"], fields["na_url"])
    logger.info("Loaded %d product row(s) from %s", len(df), path)
    return products

def _bom_row(products, code, qty, region):
    product = products.get(code)
    if product is None:
        return [code, "--", qty, ""]
    return [product.code, product.description, qty, product.url_for_region(region)]

def build_bom_rows(result: CalculationResult, products: Optional[Dict[str, ProductRecord]] = None,
                   region: str = REGIONS[0]) -> List[list]:
    products = products if products is not None else PRODUCT_MASTER
    rows = [_bom_row(products, BRACKET_PAIR_SKU, result.total_bracket_pairs, region)]
    for part in result.total_rails:
        rows.append(_bom_row(products, part.sku, part.qty, region))
    rows.append(_bom_row(products, RAIL_JOINER_SKU, result.total_joiners, region))
    return rows

def bom_dataframe(rows: List[list]) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=BOM_COLUMNS)

def rail_sku_for_length(length_mm: int) -> str:
    return next((r.sku for r in RAIL_SPECS if r.length_mm == length_mm), "")
