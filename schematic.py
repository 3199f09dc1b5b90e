# schematic.py
from typing import List, Tuple

from products import RAIL_SEGMENT_COLORS, rail_sku_for_length
from shared_logic import CalculationResult, ConfigInputs

RAIL_DRAW_HEIGHT_MM = 120
BRACKET_DRAW_WIDTH_MM = 40
BRACKET_DRAW_HEIGHT_MM = 426

MARGIN_X = 30
MARGIN_TOP = 80
MARGIN_BOTTOM = 28

# =========================================================
# Label backer (multiline)
# =========================================================
def draw_text_with_backer(x, y, text, anchor="middle", cls="lenLabel", px=12, pad_x=6, pad_y=3, back_opacity=0.5):
    lines = str(text).split("\n") or [""]

    est_w_per_char = 0.6 * px
    w = max(max(12.0, est_w_per_char * len(line)) for line in lines) + 2 * pad_x
    line_h = px * 1.25
    h = line_h * len(lines) + 2 * pad_y

    x_left = x - (w / 2.0) if anchor == "middle" else x
    y_top = y - (h * 0.5)

    rect = (
        f'<rect x="{x_left:.2f}" y="{y_top:.2f}" width="{w:.2f}" height="{h:.2f}" '
        f'fill="#fff" fill-opacity="{back_opacity:.2f}" rx="3" ry="3"/>'
    )
    start_baseline = y_top + pad_y + px
    tspans = [lines[0] if lines[0] else " "]
    for line in lines[1:]:
        tspans.append(f'<tspan x="{x:.2f}" dy="{line_h:.2f}">{line if line else " "}</tspan>')
    return rect + f'<text class="{cls}" x="{x:.2f}" y="{start_baseline:.2f}" text-anchor="{anchor}">' + "".join(tspans) + "</text>"

def legend_items() -> List[Tuple[int, str, str]]:
    return [(L, rail_sku_for_length(L), RAIL_SEGMENT_COLORS[L]) for L in sorted(RAIL_SEGMENT_COLORS, reverse=True)]

def fit_scale(wall_w_mm, wall_h_mm, max_w_px, max_h_px):
    usable_w = max_w_px - 2 * MARGIN_X
    usable_h = max_h_px - MARGIN_TOP - MARGIN_BOTTOM
    return min(usable_w / max(wall_w_mm, 1), usable_h / max(wall_h_mm, 1))

def render_wall_svg(inputs: ConfigInputs, result: CalculationResult, max_w_px=980, max_h_px=660) -> str:
    """
    Scaled front view of the display wall: labelled display outlines, VESA hole
    patterns, bracket pairs and each row's rail segments coloured by size.
    """
    rows, cols = result.rows, result.columns
    disp_w_mm = result.effective_display_width
    disp_h_mm = result.effective_display_height
    S = fit_scale(disp_w_mm * cols, disp_h_mm * rows, max_w_px, max_h_px)

    wall_w = disp_w_mm * cols * S
    start_x = (max_w_px - wall_w) / 2
    start_y = MARGIN_TOP
    dw, dh = disp_w_mm * S, disp_h_mm * S
    vw, vh = inputs.vesa_width * S, inputs.vesa_height * S
    rail_h = RAIL_DRAW_HEIGHT_MM * S
    br_w = max(BRACKET_DRAW_WIDTH_MM * S, 2)
    br_h = max(BRACKET_DRAW_HEIGHT_MM * S, 8)

    def _rect(x, y, w, h, cls, fill=None):
        fill_attr = f' fill="{fill}"' if fill else ""
        return f'<rect class="{cls}" x="{x:.2f}" y="{y:.2f}" width="{w:.2f}" height="{h:.2f}"{fill_attr}/>'
    def _circle(x, y, r=2.2, cls="vesaHole"): return f'<circle class="{cls}" cx="{x:.2f}" cy="{y:.2f}" r="{r:.2f}"/>'

    parts = [f'''<svg viewBox="0 0 {max_w_px:.2f} {max_h_px:.2f}" width="100%" height="{max_h_px:.0f}" xmlns="http://www.w3.org/2000/svg" preserveAspectRatio="xMidYMid meet">
  <style>
    .display    {{ fill:#f4f4f4; stroke:#111; stroke-width:1.5; }}
    .vesa       {{ fill:none; stroke:#888; stroke-width:1; stroke-dasharray:4 3; }}
    .vesaHole   {{ fill:#111; }}
    .bracket    {{ fill:#555; stroke:#111; stroke-width:0.5; }}
    .rail       {{ stroke:#111; stroke-width:0.8; }}
    .title      {{ font-family: Inter,-apple-system,BlinkMacSystemFont,"Segoe UI",Roboto,Arial,sans-serif; font-weight:700; font-size:16px; fill:#111; }}
    .sumLabel   {{ font-family: Inter,-apple-system,BlinkMacSystemFont,"Segoe UI",Roboto,Arial,sans-serif; font-weight:600; font-size:12px; fill:#111; }}
    .railLabel  {{ font-family: "SF Mono","Roboto Mono",Menlo,Consolas,monospace; font-weight:600; font-size:10px; fill:#fff; }}
    .cellLabel  {{ font-family: Inter,-apple-system,BlinkMacSystemFont,"Segoe UI",Roboto,Arial,sans-serif; font-size:11px; fill:#333; }}
  </style>''']

    title = f"{rows} x {cols} array • {disp_w_mm} x {disp_h_mm} mm displays"
    parts.append(draw_text_with_backer(max_w_px / 2, 24, title, "middle", "title", px=16, pad_x=8, pad_y=4))
    summary = (
        f"Rail per row: {result.selected_rail_length} mm ({result.rail_segments_per_row} segment(s))   •   "
        f"Allowed {result.min_rail}–{result.max_rail} mm"
    )
    parts.append(draw_text_with_backer(max_w_px / 2, 52, summary, "middle", "sumLabel", px=12))

    # Displays, VESA patterns and brackets
    for r in range(rows):
        for c in range(cols):
            x = start_x + c * dw
            y = start_y + r * dh
            vx = x + (dw - vw) / 2
            vy = y + (dh - vh) / 2
            parts.append(_rect(x, y, dw, dh, "display"))
            cell_labels = (
                (16, f"{disp_w_mm} x {disp_h_mm} mm"),
                (31, f"VESA: {inputs.vesa_width} x {inputs.vesa_height}"),
                (46, f"Weight: {inputs.display_weight_kg:g} kg"),
            )
            for dy, label in cell_labels:
                parts.append(f'<text class="cellLabel" x="{x + 8:.2f}" y="{y + dy:.2f}">{label}</text>')
            parts.append(_rect(vx, vy, vw, vh, "vesa"))
            for hx, hy in ((vx, vy), (vx + vw, vy), (vx, vy + vh), (vx + vw, vy + vh)):
                parts.append(_circle(hx, hy))
            by = vy + (vh - br_h) / 2
            parts.append(_rect(vx - br_w / 2, by, br_w, br_h, "bracket"))
            parts.append(_rect(vx + vw - br_w / 2, by, br_w, br_h, "bracket"))

    # Rails, centred on the wall for each row
    rail_px = result.selected_rail_length * S
    for r in range(rows):
        cy = start_y + r * dh + dh / 2
        cursor = start_x + (wall_w - rail_px) / 2
        for seg in result.selected_rail_segments:
            seg_px = seg * S
            parts.append(_rect(cursor, cy - rail_h / 2, seg_px, rail_h, "rail", fill=RAIL_SEGMENT_COLORS.get(seg, "#999")))
            parts.append(f'<text class="railLabel" x="{cursor + seg_px / 2:.2f}" y="{cy + 4:.2f}" text-anchor="middle">{seg}</text>')
            cursor += seg_px

    parts.append("</svg>")
    return "\n".join(parts)
