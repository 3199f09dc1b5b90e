# app.py — v2.8
# - Rail selection: fewest segments, then shortest total rail
# - Portrait orientation swaps the effective display size
# - BOM buy links per region, optional product master file
# - Configuration CSV download/upload

import copy
import logging
import os
import streamlit as st
import streamlit.components.v1 as components

from config_store import default_config, dump_config_csv, load_config_csv, inputs_from_config
from products import (
    DISPLAY_PRESETS, REGIONS, build_bom_rows, bom_dataframe,
    load_product_master, preset_label, PRODUCT_MASTER
)
from schematic import legend_items, render_wall_svg
from shared_logic import LANDSCAPE, PORTRAIT, calculate_configuration

logging.basicConfig(level=os.environ.get("SIGNAGE_LOG_LEVEL", "WARNING").upper())
logger = logging.getLogger("signage_configurator")

APP_VERSION = "v2.8"
PRODUCTS_FILE = os.environ.get("SIGNAGE_PRODUCTS_FILE", "ADB_Products.xlsx")

if "base_config" not in st.session_state:
    st.session_state["base_config"] = default_config()
if "config" not in st.session_state:
    st.session_state["config"] = copy.deepcopy(st.session_state["base_config"])

config = st.session_state["config"]

def cfg_get(key, default):
    if key not in config:
        config[key] = default
    return config[key]

def cfg_set(key, value):
    config[key] = value

def _sync_single(cfg, key, widget_key):
    if key in cfg:
        st.session_state[widget_key] = str(cfg[key])

def sync_session_state_from_config(cfg):
    _sync_single(cfg, "layout_name", "cfg_layout_name")
    _sync_single(cfg, "region", "cfg_region")
    _sync_single(cfg, "orientation", "cfg_orientation")
    _sync_single(cfg, "rows", "cfg_rows")
    _sync_single(cfg, "columns", "cfg_columns")
    _sync_single(cfg, "display_width", "cfg_display_width")
    _sync_single(cfg, "display_height", "cfg_display_height")
    _sync_single(cfg, "vesa_width", "cfg_vesa_width")
    _sync_single(cfg, "vesa_height", "cfg_vesa_height")
    _sync_single(cfg, "display_weight_kg", "cfg_display_weight_kg")

def _safe_index(options, value, default_idx=0):
    if not options:
        return 0
    try:
        return options.index(value)
    except ValueError:
        cmap = {str(o).strip().lower(): i for i, o in enumerate(options)}
        return min(cmap.get(str(value).strip().lower(), default_idx), len(options)-1)

st.set_page_config(page_title="ADB Signage Mount Configurator", layout="wide", initial_sidebar_state="expanded")
st.title(f"[BETA {APP_VERSION}] ADB Modular Digital Signage Mount Configurator")

st.markdown(
    """
    <style>
    :root {
        color-scheme: only light;
    }
    body, .stApp, .stAppViewContainer, .main, .block-container {
        background-color: #ffffff !important;
        color: #111111 !important;
    }
    .stSidebar, .stSidebar > div {
        background-color: #f7f7f7 !important;
        color: #111111 !important;
    }
    .stButton button, .stDownloadButton button {
        background-color: #f0f0f0 !important;
        color: #111111 !important;
        border: 1px solid #cccccc !important;
    }
    .stButton button:hover, .stDownloadButton button:hover {
        background-color: #e5e5e5 !important;
    }
    </style>
    """,
    unsafe_allow_html=True
)

with st.expander("Instructions", expanded=False):
    st.markdown(
        """
        **Using the configurator**
        1. Pick a display size preset in the sidebar, or type the display and VESA dimensions in millimetres.
        2. Choose landscape or portrait and enter how many rows and columns of displays the wall has.
        3. The rail for each row is built from 1750, 1250, 680 and 480 mm segments, using as few segments as possible.
        4. Grab the BOM CSV and the SVG diagram below the summary.

        **Limits**
        - Displays up to 50 kg and VESA heights up to 400 mm (ADB-B400 brackets).
        - This is an experimental tool. Always check the output for mistakes.
        """
    )

# =========================================================
# Sidebar — configuration file
# =========================================================
with st.sidebar:
    st.header("Configuration")
    st.download_button(
        "Download configuration CSV",
        data=dump_config_csv(config),
        file_name=f"{cfg_get('layout_name', 'wall').replace(' ', '_')}_config.csv",
        mime="text/csv"
    )
    if "_uploaded_config_name" not in st.session_state:
        st.session_state["_uploaded_config_name"] = ""
    if "_config_loaded_id" not in st.session_state:
        st.session_state["_config_loaded_id"] = None
    uploaded_cfg = st.file_uploader("Upload configuration CSV", type="csv", key="config_file_uploader")
    if st.session_state.get("_uploaded_config_name"):
        st.caption(f"Loaded config: {st.session_state['_uploaded_config_name']}")
    if uploaded_cfg is not None:
        token = (getattr(uploaded_cfg, "id", None), uploaded_cfg.name, uploaded_cfg.size)
        if st.session_state.get("_config_loaded_id") != token:
            try:
                text = uploaded_cfg.getvalue().decode("utf-8")
                new_cfg = load_config_csv(text, st.session_state["base_config"])
                st.session_state["config"] = new_cfg
                config = new_cfg
                sync_session_state_from_config(config)
                st.session_state["_uploaded_config_name"] = uploaded_cfg.name
                st.session_state["_config_loaded_id"] = token
            except (UnicodeDecodeError, ValueError) as e:
                logger.warning("Config upload failed: %s", e)
                st.error(f"Failed to load configuration: {e}")
                st.session_state["_uploaded_config_name"] = ""
                st.session_state["_config_loaded_id"] = None
            st.session_state.pop("config_file_uploader", None)
            st.rerun()
    else:
        st.session_state["_config_loaded_id"] = None
    if st.button("Reset configuration"):
        st.session_state["confirm_reset"] = True

    if st.session_state.get("confirm_reset"):
        st.warning("Reset will revert all inputs to defaults.")
        col_reset1, col_reset2 = st.columns(2)
        with col_reset1:
            if st.button("Yes, reset", key="cfg_reset_confirm"):
                st.session_state["config"] = copy.deepcopy(st.session_state["base_config"])
                config = st.session_state["config"]
                sync_session_state_from_config(config)
                st.session_state["_uploaded_config_name"] = ""
                st.session_state["_config_loaded_id"] = None
                st.session_state["confirm_reset"] = False
                st.rerun()
        with col_reset2:
            if st.button("Cancel", key="cfg_reset_cancel"):
                st.session_state["confirm_reset"] = False
                st.rerun()

# =========================================================
# Product master
# =========================================================
try:
    products = load_product_master(PRODUCTS_FILE)
except (OSError, ValueError) as e:
    logger.warning("Product master %s unreadable: %s", PRODUCTS_FILE, e)
    st.error(f"Failed to read {PRODUCTS_FILE}: {e}. Using built-in product list.")
    products = dict(PRODUCT_MASTER)

# =========================================================
# Sidebar — display specification
# =========================================================
with st.sidebar:
    st.header("Inputs")
    name = st.text_input("Layout Name", cfg_get("layout_name", "Video Wall 01"), key="cfg_layout_name")
    cfg_set("layout_name", name)

    region = st.selectbox("Region", REGIONS, index=_safe_index(REGIONS, cfg_get("region", REGIONS[0])), key="cfg_region")
    cfg_set("region", region)

    st.subheader("Display size preset")
    for i, preset in enumerate(DISPLAY_PRESETS):
        if st.button(preset_label(preset), key=f"preset_{i}"):
            for k in ("display_width", "display_height", "vesa_width", "vesa_height", "display_weight_kg"):
                cfg_set(k, str(preset[k]))
                st.session_state[f"cfg_{k}"] = str(preset[k])
            st.rerun()

    st.subheader("Display (mm)")
    display_width = st.text_input("Display width (mm)", cfg_get("display_width", "1440"), key="cfg_display_width")
    display_height = st.text_input("Display height (mm)", cfg_get("display_height", "810"), key="cfg_display_height")
    vesa_width = st.text_input("VESA width (mm)", cfg_get("vesa_width", "400"), key="cfg_vesa_width")
    vesa_height = st.text_input("VESA height (mm)", cfg_get("vesa_height", "400"), key="cfg_vesa_height")
    display_weight = st.text_input("Display weight (kg)", cfg_get("display_weight_kg", "25"), key="cfg_display_weight_kg")
    cfg_set("display_width", display_width)
    cfg_set("display_height", display_height)
    cfg_set("vesa_width", vesa_width)
    cfg_set("vesa_height", vesa_height)
    cfg_set("display_weight_kg", display_weight)

    st.subheader("Array")
    orientation_options = [LANDSCAPE, PORTRAIT]
    orientation = st.radio(
        "Orientation",
        orientation_options,
        index=_safe_index(orientation_options, cfg_get("orientation", LANDSCAPE)),
        format_func=str.capitalize,
        horizontal=True,
        key="cfg_orientation"
    )
    cfg_set("orientation", orientation)
    rows_text = st.text_input("Rows", cfg_get("rows", "3"), key="cfg_rows")
    cols_text = st.text_input("Columns", cfg_get("columns", "3"), key="cfg_columns")
    cfg_set("rows", rows_text)
    cfg_set("columns", cols_text)

# =========================================================
# Calculate
# =========================================================
inputs = inputs_from_config(config)
result, error = calculate_configuration(inputs)

if error is not None:
    st.error(error.message)
    st.stop()

st.subheader("Summary")
m1, m2, m3, m4 = st.columns(4)
m1.metric("Display size used", f"{result.effective_display_width} x {result.effective_display_height} mm")
m2.metric("Allowed rail length (each row)", f"{result.min_rail}–{result.max_rail} mm")
m3.metric("Segment count (each row)", result.rail_segments_per_row)
m4.metric("Selected rail length (each row)", f"{result.selected_rail_length} mm")
st.caption("Segments (each row): " + " + ".join(f"{s} mm" for s in result.selected_rail_segments))

# =========================================================
# BOM table + CSV
# =========================================================
st.markdown('<div id="bom"></div>', unsafe_allow_html=True)
st.subheader("Bill of Materials")
df_bom = bom_dataframe(build_bom_rows(result, products, region))
st.dataframe(
    df_bom,
    use_container_width=True,
    hide_index=True,
    column_config={"Buy link": st.column_config.LinkColumn("Buy link", display_text="Buy")}
)
csv_bytes = df_bom.to_csv(index=False).encode("utf-8")
st.download_button("Download BOM CSV", data=csv_bytes, file_name=f"{name}_BOM.csv", mime="text/csv")

# =========================================================
# Diagram
# =========================================================
st.subheader("Diagram")
legend_html = " &nbsp; ".join(
    f'<span style="display:inline-block;width:14px;height:10px;background:{color};"></span> {length} mm ({sku})'
    for length, sku, color in legend_items()
)
st.markdown(legend_html, unsafe_allow_html=True)

svg = render_wall_svg(inputs, result)
components.html(svg, height=680, scrolling=True)

st.download_button(
    "Download diagram as SVG",
    data=svg.encode("utf-8"),
    file_name=f"{name}_diagram.svg",
    mime="image/svg+xml"
)
