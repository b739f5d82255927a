# helpers/sitemap_writer.py
# ---------------------------------------------------------------
# Paginated sitemap writer.
# Streams Url records into sitemap_<N>.xml files, splitting on the
# protocol limits, then writes sitemap_index.xml over all of them.
# ---------------------------------------------------------------

from __future__ import annotations
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterable, Iterator, List, Optional, Union
from xml.sax.saxutils import escape

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from helpers.errors import ConfigurationError
from helpers.sitemap_utils import Url, add_prefix, format_w3c

logger = logging.getLogger(__name__)

FILENAME_INDEX = "sitemap_index.xml"
FILENAME_SITEMAP = "sitemap_{}.xml"

# Protocol limits per sitemap file
MAX_ITEMS = 50_000
MAX_FILE_SIZE = 1024 * 1024 * 49  # 49 MiB

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'
INDENT = "  "

_END = object()


class GeneratorOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    sitemap_loc_prefix: str = ""  # prepended to sitemap file names in the index
    url_loc_prefix: str = ""      # prepended to every Url location


@dataclass
class GenerationSession:
    """Counters of a single generate() run."""
    current_file_index: int = 0
    items_count: int = 0
    bytes_written: int = 0  # current file only
    files_last_modified: Dict[int, datetime] = field(default_factory=dict)

    def track_last_modified(self, last_modified: Optional[datetime]) -> None:
        if last_modified is None:
            return
        known = self.files_last_modified.get(self.current_file_index)
        if known is None or last_modified > known:
            self.files_last_modified[self.current_file_index] = last_modified

    def limit_reached(self) -> bool:
        return self.items_count % MAX_ITEMS == 0 or self.bytes_written > MAX_FILE_SIZE


def _element(name: str, text: str, depth: int) -> str:
    return f"{INDENT * depth}<{name}>{escape(text)}</{name}>\n"


@contextmanager
def _open_document(path: Path, root: str) -> Iterator[BinaryIO]:
    """Open an XML document with its root element; the root is closed only on success."""
    with path.open("wb") as fh:
        fh.write(XML_DECLARATION.encode("utf-8"))
        fh.write(f'<{root} xmlns="{SITEMAP_NS}">\n'.encode("utf-8"))
        yield fh
        fh.write(f"</{root}>\n".encode("utf-8"))
        fh.flush()


class SitemapGenerator:
    """
    Writes sitemap files and their index into ``target_dir``.

    Options (as a dict or keyword arguments):
    - sitemap_loc_prefix: public URL prefix of the sitemap files, used in the index
    - url_loc_prefix: prefix applied to every Url location

    An instance must not run generate() concurrently.
    """

    def __init__(self, target_dir: Union[str, Path], options: Optional[Dict[str, Any]] = None, **kwargs: Any):
        # Path("") collapses to "."
        if not target_dir or (isinstance(target_dir, Path) and target_dir == Path("")):
            raise ConfigurationError("Target directory should not be empty")

        merged = {**(options or {}), **kwargs}
        unknown = [str(k) for k in merged if k not in GeneratorOptions.model_fields]
        if unknown:
            raise ConfigurationError(f'Unknown options: "{", ".join(unknown)}"')

        try:
            self.options = GeneratorOptions(**merged)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid options: {e}") from e

        self.target_dir = Path(target_dir)
        self._session = GenerationSession()
        self._running = False

    # --- session state (read-only views) ---
    @property
    def current_file_index(self) -> int:
        return self._session.current_file_index

    @property
    def items_count(self) -> int:
        return self._session.items_count

    @property
    def files_last_modified(self) -> Dict[int, datetime]:
        return dict(self._session.files_last_modified)

    def generate(self, urls: Iterable[Url]) -> List[Path]:
        """
        Consume ``urls`` once and write the sitemaps plus the index.

        Returns the written paths, sitemaps first and the index last; an empty
        input writes nothing. Any error propagates: sitemaps already completed
        stay on disk, no index is written, and the failed run's counters are
        kept until the next call.
        """
        if self._running:
            raise RuntimeError("generate() is already running on this SitemapGenerator")

        self._running = True
        try:
            self._session = GenerationSession()
            written = self._generate_sitemaps(iter(urls))
            if written:
                written.append(self._generate_index())
                logger.info(
                    "Sitemaps generated: %d url(s) in %d file(s) under %s",
                    self._session.items_count,
                    len(written) - 1,
                    self.target_dir,
                )
        finally:
            self._running = False

        self._session = GenerationSession()
        return written

    def _generate_sitemaps(self, urls: Iterator[Any]) -> List[Path]:
        session = self._session
        url = next(urls, _END)
        if url is _END:
            logger.info("No urls given, no sitemap written")
            return []

        written: List[Path] = []
        while True:
            path = self._build_path(FILENAME_SITEMAP.format(session.current_file_index))
            session.bytes_written = 0
            exhausted = False

            with _open_document(path, "urlset") as fh:
                while True:
                    self._write_url(fh, url)
                    if session.limit_reached():
                        break
                    url = next(urls, _END)
                    if url is _END:
                        exhausted = True
                        break

            written.append(path)
            logger.info("Wrote %s (%d bytes of urls, %d urls so far)", path, session.bytes_written, session.items_count)

            if not exhausted:
                url = next(urls, _END)
                exhausted = url is _END
            if exhausted:
                return written

            session.current_file_index += 1
            logger.debug("Sitemap limit reached, continuing in file #%d", session.current_file_index)

    def _write_url(self, fh: BinaryIO, url: Any) -> None:
        if not isinstance(url, Url):
            raise TypeError(f"Each url item must be an instance of {Url.__name__}, got {type(url).__name__}")

        loc = add_prefix(url.location, self.options.url_loc_prefix)
        parts = [f"{INDENT}<url>\n", _element("loc", loc, 2)]

        if url.last_modified is not None:
            parts.append(_element("lastmod", format_w3c(url.last_modified), 2))
        if url.change_frequency is not None:
            parts.append(_element("changefreq", url.change_frequency, 2))
        priority = url.get_priority()
        if priority is not None:
            parts.append(_element("priority", priority, 2))

        parts.append(f"{INDENT}</url>\n")

        session = self._session
        session.bytes_written += fh.write("".join(parts).encode("utf-8"))
        session.track_last_modified(url.last_modified)
        session.items_count += 1

    def _generate_index(self) -> Path:
        session = self._session
        path = self._build_path(FILENAME_INDEX)

        with _open_document(path, "sitemapindex") as fh:
            for i in range(session.current_file_index + 1):
                loc = add_prefix(FILENAME_SITEMAP.format(i), self.options.sitemap_loc_prefix)
                parts = [f"{INDENT}<sitemap>\n", _element("loc", loc, 2)]

                # newest lastmod among the file's urls
                last_modified = session.files_last_modified.get(i)
                if last_modified is not None:
                    parts.append(_element("lastmod", format_w3c(last_modified), 2))

                parts.append(f"{INDENT}</sitemap>\n")
                fh.write("".join(parts).encode("utf-8"))

        logger.info("Wrote %s referencing %d sitemap(s)", path, session.current_file_index + 1)
        return path

    def _build_path(self, file_name: str) -> Path:
        self.target_dir.mkdir(mode=0o755, parents=True, exist_ok=True)
        return self.target_dir / file_name
