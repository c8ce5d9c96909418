"""
Configuration and constants for screen-ocr.
"""

# Fragments shorter than this (after trimming) are recognition artifacts
MIN_TEXT_LENGTH = 2

# Max vertical gap between consecutive fragments in one group (~5% of height)
PROXIMITY_THRESHOLD = 0.05

# Vision recognition languages, in priority order
RECOGNITION_LANGUAGES = ["zh-Hant", "zh-Hans", "en-US"]

# PaddleOCR language model
PADDLE_LANG = "en"

ENGINES = ("auto", "vision", "paddle")

SUPPORTED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".webp"}

# Interface chrome: any fragment starting with or containing one of these is dropped
UI_DENYLIST = [
    # menu bars
    "File Edit",
    "Edit Selection",
    "Selection View",
    "Go Run Terminal",
    "Terminal Window Help",
    # editor and extension noise
    "Open Editors",
    "S Code",
    "@id:",
    "Step Id:",
    "Open VSX",
    "marketplace",
    "Checked command",
    # code syntax
    "import (",
    "import(",
    "import（",
    "package main",
    "func main",
    "return err",
    ":= ",
    "err != nil",
    "});",
    "#include",
    # breadcrumbs
    " › ",
    " > ",
    "〉",
    # file extensions
    ".go",
    ".py",
    ".swift",
    ".js",
    ".ts",
    ".json",
    ".yaml",
    ".md",
]

# Interface chrome the literal list cannot express; regexes searched per line
UI_PATTERNS = [
    r"^\d+$",  # editor gutter line numbers
    r"^\d+月\d+日",  # menu bar date
    r"^[上下]午\d+:\d+",  # menu bar time
    r"^[〉›>\[\]{}()]+$",  # lone brackets and breadcrumb glyphs
    r'^"',  # string literals
    r"^回\s",  # icon glyph read as text
    r"^f\d+\s",  # status bar shortcuts
]
