APP_NAME = "JsonSmith"
APP_VERSION = "1.0.0"

RUNTIME_DIR_NAME = "JsonSmith"
RUNTIME_DIR_ENV = "JSONSMITH_RUNTIME_DIR"
SETTINGS_FILENAME = "jsonsmith_settings.json"
SESSION_FILENAME = "jsonsmith_session.json"

DIAG_LOG_MAX_BYTES = 512 * 1024
DIAG_LOG_KEEP_BYTES = 256 * 1024
DIAG_LOG_FILENAME = "jsonsmith_diagnostics.log"
DIAG_LOG_BLOCK_MARKER = "\n---\n"
DIAG_LOG_CONTEXT_LINES = 2

LIVE_FEEDBACK_DELAY_MS_DEFAULT = 300
LIVE_FEEDBACK_DELAY_MS_MAX = 5000

DEFAULT_INDENT_WIDTH = 2
INDENT_WIDTH_MIN = 1
INDENT_WIDTH_MAX = 8
INDENT_WIDTH_CHOICES = (2, 4)

FONT_SIZE_DEFAULT = 11
FONT_SIZE_MIN = 6
FONT_SIZE_MAX = 32

THEME_DARK = "dark"
THEME_LIGHT = "light"
THEME_CHOICES = (THEME_DARK, THEME_LIGHT)

UNTITLED_TAB_NAME = "Untitled"

# Vendor prefixes some decoders put in front of their messages.
PARSER_MESSAGE_PREFIXES = ("JSON.parse: ", "JSON Parse error: ")

# Native-message markers that route to the unterminated-string scan.
# "invalid control character" is how json.loads reports a raw line feed
# inside a string literal.
UNTERMINATED_MESSAGE_MARKERS = (
    "unterminated",
    "unexpected end of json",
    "invalid control character",
)

GENERIC_SUGGESTION = "Check your JSON syntax."
LOCATION_SUGGESTION = "Check syntax at this location"

SIZE_UNITS = ("B", "KB", "MB")
SIZE_STEP = 1024

# Worker message protocol.
OP_VALIDATE = "VALIDATE"
OP_STATS = "STATS"
OP_COMPARE = "COMPARE"
OP_FORMAT = "FORMAT"
OP_MINIFY = "MINIFY"
OP_SORT_KEYS = "SORT_KEYS"
OP_ERROR = "ERROR"
RESULT_SUFFIX = "_RESULT"
WORKER_OPERATIONS = (OP_VALIDATE, OP_STATS, OP_COMPARE, OP_FORMAT, OP_MINIFY, OP_SORT_KEYS)
REQUEST_ID_LENGTH = 12

DIFF_ADDED = "added"
DIFF_REMOVED = "removed"
DIFF_CHANGED = "changed"
DIFF_UNCHANGED = "unchanged"

THEME_PALETTES = {
    THEME_DARK: {
        "bg": "#0f141c",
        "panel_bg": "#151c27",
        "fg": "#e6edf5",
        "muted_fg": "#7d8ba0",
        "text_bg": "#0b1017",
        "insert_bg": "#e6edf5",
        "select_bg": "#2e4e67",
        "select_fg": "#ffffff",
        "error_line_bg": "#5a0f16",
        "error_line_fg": "#ffdce1",
        "valid_fg": "#6fd19a",
        "invalid_fg": "#ff7b86",
        "added_fg": "#6fd19a",
        "removed_fg": "#ff7b86",
        "changed_fg": "#f2c46d",
    },
    THEME_LIGHT: {
        "bg": "#f4f6f9",
        "panel_bg": "#ffffff",
        "fg": "#1c2430",
        "muted_fg": "#5f6b7a",
        "text_bg": "#ffffff",
        "insert_bg": "#1c2430",
        "select_bg": "#b9d4ea",
        "select_fg": "#1c2430",
        "error_line_bg": "#ffdce1",
        "error_line_fg": "#5a0f16",
        "valid_fg": "#1f7a48",
        "invalid_fg": "#b3202f",
        "added_fg": "#1f7a48",
        "removed_fg": "#b3202f",
        "changed_fg": "#8a5a00",
    },
}
