# shared_logic.py
import logging
import math
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

INSTALL_MARGIN_MM = 80
MAX_DISPLAY_WEIGHT_KG = 50
MAX_VESA_HEIGHT_MM = 400

LANDSCAPE = "landscape"
PORTRAIT = "portrait"
ORIENTATIONS = (LANDSCAPE, PORTRAIT)

# Error codes
INVALID_ARRAY_DIMENSIONS = "InvalidArrayDimensions"
INVALID_DISPLAY_DIMENSIONS = "InvalidDisplayDimensions"
INVALID_WEIGHT = "InvalidWeight"
UNSUPPORTED_WEIGHT_CLASS = "UnsupportedWeightClass"
UNSUPPORTED_BRACKET_CLASS = "UnsupportedBracketClass"
INVALID_ORIENTATION = "InvalidOrientation"
INFEASIBLE_RANGE = "InfeasibleRange"
NO_RAIL_COMBINATION = "NoRailCombination"

@dataclass(frozen=True)
class RailSpec:
    length_mm: int
    sku: str

RAIL_SPECS: Tuple[RailSpec, ...] = (
    RailSpec(1750, "ADB-R175"),
    RailSpec(1250, "ADB-R125"),
    RailSpec(680, "ADB-R68"),
    RailSpec(480, "ADB-R48"),
)

@dataclass(frozen=True)
class ConfigInputs:
    rows: Optional[int]
    columns: Optional[int]
    display_width: Optional[int]
    display_height: Optional[int]
    vesa_width: Optional[int]
    vesa_height: Optional[int]
    display_weight_kg: Optional[float]
    orientation: str = LANDSCAPE

@dataclass(frozen=True)
class ValidationError:
    code: str
    message: str

@dataclass(frozen=True)
class RailGeometry:
    effective_display_width: int
    effective_display_height: int
    min_rail: int
    max_rail: int

@dataclass
class ComboState:
    counts: List[int]
    segment_count: int

@dataclass(frozen=True)
class RailPart:
    length_mm: int
    sku: str
    qty: int

@dataclass(frozen=True)
class CalculationResult:
    effective_display_width: int
    effective_display_height: int
    min_rail: int
    max_rail: int
    selected_rail_length: int
    selected_rail_segments: List[int]
    rail_parts_per_row: List[RailPart]
    rail_segments_per_row: int
    total_bracket_pairs: int
    total_rails: List[RailPart]
    total_joiners: int
    rows: int = 1
    columns: int = 1

_DIGITS_RE = re.compile(r"^\s*([0-9]+)\s*$")

def parse_int_field(text) -> Optional[int]:
    """Parse a numeric text field the way the form accepts it: digits only."""
    if text is None:
        return None
    if isinstance(text, bool):
        return None
    if isinstance(text, int):
        return text
    m = _DIGITS_RE.match(str(text))
    if not m:
        return None
    return int(m.group(1))

def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)

def is_valid_positive_integer(value) -> bool:
    if not _is_number(value) or not math.isfinite(value):
        return False
    return float(value).is_integer() and value >= 1

def is_valid_non_negative_number(value) -> bool:
    return _is_number(value) and math.isfinite(value) and value >= 0

def _fail(code: str, message: str):
    logger.warning("Configuration rejected (%s): %s", code, message)
    return None, ValidationError(code, message)

def resolve_geometry(inputs: ConfigInputs) -> Tuple[Optional[RailGeometry], Optional[ValidationError]]:
    """
    Validate the inputs and derive the single-row rail range.
    Checks run in a fixed order and the first failure is returned:
      1. rows/columns, 2. display + VESA dimensions, 3. weight,
      4. weight class, 5. bracket class, 6. orientation,
    then the orientation swap and the min <= max range check.
    """
    if not is_valid_positive_integer(inputs.rows) or not is_valid_positive_integer(inputs.columns):
        return _fail(INVALID_ARRAY_DIMENSIONS, "Rows and columns must be integers greater than or equal to 1.")

    dims = [inputs.display_width, inputs.display_height, inputs.vesa_width, inputs.vesa_height]
    if any(not is_valid_positive_integer(v) for v in dims):
        return _fail(INVALID_DISPLAY_DIMENSIONS, "All dimensions must be integer millimetres greater than or equal to 1.")

    if not is_valid_non_negative_number(inputs.display_weight_kg):
        return _fail(INVALID_WEIGHT, "Display weight must be a non-negative number.")

    if inputs.display_weight_kg > MAX_DISPLAY_WEIGHT_KG:
        return _fail(
            UNSUPPORTED_WEIGHT_CLASS,
            f"Displays heavier than {MAX_DISPLAY_WEIGHT_KG} kg need the ADB-B600H bracket, which this tool does not support yet. "
            "Please contact Atdec for more information."
        )

    if inputs.vesa_height > MAX_VESA_HEIGHT_MM:
        return _fail(
            UNSUPPORTED_BRACKET_CLASS,
            f"VESA heights over {MAX_VESA_HEIGHT_MM} mm need brackets longer than ADB-B400, which this tool does not support yet. "
            "Please contact Atdec for more information."
        )

    orientation = str(inputs.orientation).strip().lower()
    if orientation not in ORIENTATIONS:
        return _fail(INVALID_ORIENTATION, f"Orientation must be landscape or portrait, not '{inputs.orientation}'.")

    width, height = int(inputs.display_width), int(inputs.display_height)
    if orientation == PORTRAIT:
        width, height = height, width
    columns = int(inputs.columns)

    min_rail = width * (columns - 1) + int(inputs.vesa_width) + INSTALL_MARGIN_MM
    max_rail = width * columns
    if min_rail > max_rail:
        return _fail(
            INFEASIBLE_RANGE,
            f"Invalid configuration: minimum rail length ({min_rail} mm) exceeds maximum rail length ({max_rail} mm)."
        )
    return RailGeometry(width, height, min_rail, max_rail), None

def _combo_key(target: int, combo: ComboState) -> Tuple[int, int]:
    # fewest segments first, then the shortest total rail
    return (combo.segment_count, target)

def find_best_rail_combination(min_rail: int, max_rail: int,
                               catalog: Sequence[RailSpec] = RAIL_SPECS) -> Optional[ComboState]:
    """
    Minimal-segment combination whose lengths sum into [min_rail, max_rail].

    best[s] holds the fewest-segment way to reach exactly s mm (or None).
    Among reachable sums in range the winner is the smallest
    (segment_count, sum) pair.
    """
    if max_rail < 0 or min_rail > max_rail:
        return None
    n = len(catalog)
    best: List[Optional[ComboState]] = [None] * (max_rail + 1)
    best[0] = ComboState([0] * n, 0)

    for s in range(1, max_rail + 1):
        best_at_sum = None
        for i, rail in enumerate(catalog):
            if rail.length_mm > s:
                continue
            prev = best[s - rail.length_mm]
            if prev is None:
                continue
            if best_at_sum is None or prev.segment_count + 1 < best_at_sum.segment_count:
                counts = list(prev.counts)
                counts[i] += 1
                best_at_sum = ComboState(counts, prev.segment_count + 1)
        best[s] = best_at_sum

    candidates = [(t, best[t]) for t in range(max(min_rail, 0), max_rail + 1) if best[t] is not None]
    if not candidates:
        return None
    target, combo = min(candidates, key=lambda item: _combo_key(*item))
    logger.debug("Best rail sum in [%d, %d]: %d mm with %d segment(s)", min_rail, max_rail, target, combo.segment_count)
    return ComboState(list(combo.counts), combo.segment_count)

def segments_from_counts(counts: Sequence[int], catalog: Sequence[RailSpec] = RAIL_SPECS) -> List[int]:
    segs = []
    for rail, qty in zip(catalog, counts):
        segs.extend([rail.length_mm] * qty)
    return sorted(segs, reverse=True)

def calculate_configuration(inputs: ConfigInputs,
                            catalog: Sequence[RailSpec] = RAIL_SPECS) -> Tuple[Optional[CalculationResult], Optional[ValidationError]]:
    geometry, error = resolve_geometry(inputs)
    if error is not None:
        return None, error

    combo = find_best_rail_combination(geometry.min_rail, geometry.max_rail, catalog)
    if combo is None:
        return _fail(
            NO_RAIL_COMBINATION,
            f"No valid rail combination exists between {geometry.min_rail} mm and {geometry.max_rail} mm using available rail sizes."
        )

    rows, columns = int(inputs.rows), int(inputs.columns)
    per_row = [
        RailPart(rail.length_mm, rail.sku, qty)
        for rail, qty in sorted(zip(catalog, combo.counts), key=lambda item: -item[0].length_mm)
        if qty > 0
    ]
    totals = [RailPart(p.length_mm, p.sku, p.qty * rows) for p in per_row]
    segments = segments_from_counts(combo.counts, catalog)
    selected_len = sum(segments)

    result = CalculationResult(
        effective_display_width=geometry.effective_display_width,
        effective_display_height=geometry.effective_display_height,
        min_rail=geometry.min_rail,
        max_rail=geometry.max_rail,
        selected_rail_length=selected_len,
        selected_rail_segments=segments,
        rail_parts_per_row=per_row,
        rail_segments_per_row=combo.segment_count,
        total_bracket_pairs=rows * columns,
        total_rails=totals,
        total_joiners=max(combo.segment_count - 1, 0) * rows,
        rows=rows,
        columns=columns,
    )
    logger.debug("Calculated %dx%d array: %s", rows, columns, segments)
    return result, None
