"""Field-aligned extraction of typed records from HTML documents."""

from .errors import ConfigError, InvalidPattern, ShapeMismatch, XtractError
from .fields import DEFAULT_PATTERN, FieldSpec
from .records import RecordShape
from .scraper import Scraper
from .store import ExtractionStore

__all__ = [
    "config",
    "fields",
    "resolver",
    "aligner",
    "records",
    "store",
    "diagnostics",
    "http_fetcher",
    "exporters",
    "scraper",
    "cli",
    "FieldSpec",
    "DEFAULT_PATTERN",
    "RecordShape",
    "Scraper",
    "ExtractionStore",
    "XtractError",
    "InvalidPattern",
    "ShapeMismatch",
    "ConfigError",
]

__version__ = "0.1.0"
