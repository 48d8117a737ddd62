"""Application constants."""

USER_AGENT = "infradash/1.0 (+structure-dashboard)"

BRIDGE = "BRIDGE"
CULVERT = "CULVERT"
OTHER = "OTHER"
UNKNOWN = "UNKNOWN"
STRUCTURE_KINDS = (BRIDGE, CULVERT, OTHER, UNKNOWN)
FILTERABLE_KINDS = (BRIDGE, CULVERT, OTHER)

CONDITION_RATINGS = ("EXCELLENT", "GOOD", "FAIR", "POOR")
ALL_RATINGS = (*CONDITION_RATINGS, UNKNOWN)

ALL = "all"
NULLISH_TEXT = ("", "null", "undefined")

NUMERIC_ATTRIBUTES = ("total_length", "total_width", "max_clear_span")
ATTRIBUTE_LABELS = {
    "total_length": "totalLength",
    "total_width": "totalWidth",
    "max_clear_span": "maxClearSpan",
}

# (floor, padding) used to size the range controls from the loaded data.
RANGE_BOUND_RULES = {
    "total_length": (100, 10),
    "total_width": (20, 5),
    "max_clear_span": (50, 10),
}

MODES = ("split", "combined")
FIELD_PROFILES = ("bridge", "culvert", "combined")
BASELINE_SOURCE = "baseline"

EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "source",
    "event",
    "status",
    "generation",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)
