"""Extraction engine: classify input, resolve fields, build and store records."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Type, Union

from pydantic import BaseModel

from .aligner import parse_document, resolve_all, resolve_one
from .config import Config
from .diagnostics import DiagnosticsLog
from .errors import ShapeMismatch
from .exporters import save_csv, save_excel, to_json
from .fields import FieldSpec
from .http_fetcher import HttpFetcher
from .records import RecordShape, build_record
from .store import ExtractionStore
from .url_utils import is_locator, preview

logger = logging.getLogger(__name__)

ShapeLike = Union[RecordShape, Type[BaseModel], None]


def _resolve_shape(shape: ShapeLike, specs: Sequence[FieldSpec]) -> RecordShape:
    if shape is None:
        return RecordShape.from_specs(specs)
    if isinstance(shape, RecordShape):
        return shape
    if isinstance(shape, type) and issubclass(shape, BaseModel):
        return RecordShape.from_model(shape)
    raise TypeError(f"unsupported record shape: {shape!r}")


class Scraper:
    """Applies a fixed list of field specs to documents and accumulates the records.

    A single instance may be shared across threads; the record store and the
    diagnostics channel are the only state shared between calls.
    """

    def __init__(
        self,
        specs: Sequence[FieldSpec],
        shape: ShapeLike = None,
        config: Optional[Config] = None,
        fetcher: Optional[HttpFetcher] = None,
    ) -> None:
        self.specs: List[FieldSpec] = list(specs)
        self.config = config or Config()
        self.shape = _resolve_shape(shape, self.specs)
        self.shape.validate_specs(self.specs)
        self.store: ExtractionStore[BaseModel] = ExtractionStore()
        self.diagnostics = DiagnosticsLog(verbose=self.config.logging.verbose)
        fetch = self.config.fetch
        self.fetcher = fetcher or HttpFetcher(
            user_agent=fetch.user_agent,
            timeout=fetch.timeout,
            max_retries=fetch.max_retries,
            backoff_base=fetch.backoff_base,
            follow_redirects=fetch.follow_redirects,
        )

    def __enter__(self) -> "Scraper":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.diagnostics.close()
        self.fetcher.close()

    # diagnostics

    def log(self, message: str) -> None:
        self.diagnostics.log(message)

    def log_history(self) -> List[str]:
        return self.diagnostics.history()

    def set_logging_verbose(self, enabled: bool) -> None:
        self.diagnostics.set_verbose(enabled)

    # extraction

    def _load_markup(self, source: str) -> Optional[str]:
        if not is_locator(source):
            self.log("Scraping " + preview(source))
            return source
        url = source.strip()
        self.log("Downloading " + url)
        html = self.fetcher.fetch(url)
        if html is None:
            self.log("Failed to get " + url)
            return None
        self.log("Scraping " + url)
        return html

    def extract_one(self, source: str) -> Optional[BaseModel]:
        """Extract a single record from markup or a URL; ``None`` if the fetch failed."""
        markup = self._load_markup(source)
        if markup is None:
            return None
        document = parse_document(markup, self.config.extraction.parser)
        row = resolve_one(self.specs, document, self.config.extraction.max_text_length)
        return self.store.add(build_record(row, self.shape))

    def extract_many(self, source: str) -> Optional[List[BaseModel]]:
        """Extract one record per aligned row; ``None`` on fetch or internal failure.

        Rows are stored only once every one of them built. Record shape
        errors are configuration mistakes and always propagate.
        """
        try:
            markup = self._load_markup(source)
            if markup is None:
                return None
            document = parse_document(markup, self.config.extraction.parser)
            rows = resolve_all(self.specs, document, self.config.extraction.max_text_length)
            records = [build_record(row, self.shape) for row in rows]
            return self.store.extend(records)
        except ShapeMismatch:
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception("Extraction failed: %s", exc)
            self.log(f"Extraction failed: {exc}")
            return None

    # results

    def data(self) -> List[BaseModel]:
        return self.store.snapshot()

    def json_data(self) -> str:
        return to_json(self.store.snapshot())

    def save_csv(self, path: Path | str) -> Path:
        return save_csv(self.store.snapshot(), self.shape, path)

    def save_excel(self, path: Path | str) -> Path:
        return save_excel(self.store.snapshot(), self.shape, path)


__all__ = ["Scraper"]
