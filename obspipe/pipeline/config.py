import os
from dotenv import load_dotenv

load_dotenv()

LABEL_COLUMN = os.getenv("OBSPIPE_LABEL_COLUMN", "site")
VALUE_COLUMN = os.getenv("OBSPIPE_VALUE_COLUMN", "temperature")
CATEGORY_COLUMN = os.getenv("OBSPIPE_CATEGORY_COLUMN", "country")

LOOKUP_LABEL_COLUMN = os.getenv("OBSPIPE_LOOKUP_LABEL_COLUMN", "site")
LOOKUP_CATEGORY_COLUMN = os.getenv("OBSPIPE_LOOKUP_CATEGORY_COLUMN", "country")

OUTPUT_DIR = os.getenv("OBSPIPE_OUTPUT_DIR", "output")
OUTPUT_SUFFIX = os.getenv("OBSPIPE_OUTPUT_SUFFIX", "_clean")

STRICT = os.getenv("OBSPIPE_STRICT", "false").strip().lower() in {"1", "true", "yes", "on"}
LOG_LEVEL = os.getenv("OBSPIPE_LOG_LEVEL", "INFO")

ALLOWED_CATEGORIES = frozenset({"US", "UK"})
UNKNOWN_CATEGORY = "unknown"
