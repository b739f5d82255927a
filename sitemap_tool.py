# sitemap_tool.py
# ---------------------------------------------------------------
# Command line front end: reads urls from a CSV file or the command
# line and writes paginated sitemaps + sitemap_index.xml.
# ---------------------------------------------------------------

from __future__ import annotations
import argparse
import os
import sys
from typing import List, Optional

from config_paths import DEFAULT_OUTPUT_DIR, LOG_DIR, LOG_FILE_NAME, LOG_LEVEL_ENV
from helpers.errors import SitemapError
from helpers.sitemap_utils import FREQUENCIES
from helpers.sitemap_writer import SitemapGenerator
from helpers.url_sources import iter_csv_records, iter_path_records, parse_lastmod
from logging_setup import get_app_logger, setup_logging

logger = get_app_logger("sitemap.cli")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Generate paginated sitemap files and sitemap_index.xml")
    p.add_argument("--out", default=str(DEFAULT_OUTPUT_DIR), help="target directory (created if missing)")
    p.add_argument("--csv", help="CSV file with columns loc[,lastmod,changefreq,priority]")
    p.add_argument("paths", nargs="*", default=[], help="e.g. / /about /privacy")
    p.add_argument("--base", help="e.g. https://example.com; default for both prefixes")
    p.add_argument("--sitemap-loc-prefix", help="public URL prefix of the sitemap files")
    p.add_argument("--url-loc-prefix", help="prefix applied to every url location")
    p.add_argument("--lastmod", help="ISO date/date-time applied to command line paths")
    p.add_argument("--changefreq", choices=FREQUENCIES, help="applied to command line paths")
    p.add_argument("--priority", type=float, help="0.0 - 1.0, applied to command line paths")
    p.add_argument("--log-level", default=os.getenv(LOG_LEVEL_ENV, "INFO"))
    p.add_argument("--log-dir", default=str(LOG_DIR), help="use '' to disable the log file")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if bool(args.csv) == bool(args.paths):
        parser.error("give either --csv FILE or at least one path, not both")

    setup_logging(log_level=args.log_level, log_dir=args.log_dir or None, log_file_name=LOG_FILE_NAME)

    sitemap_prefix = args.sitemap_loc_prefix if args.sitemap_loc_prefix is not None else (args.base or "")
    url_prefix = args.url_loc_prefix if args.url_loc_prefix is not None else (args.base or "")

    try:
        generator = SitemapGenerator(
            args.out,
            sitemap_loc_prefix=sitemap_prefix,
            url_loc_prefix=url_prefix,
        )
        if args.csv:
            urls = iter_csv_records(args.csv)
        else:
            lastmod = parse_lastmod(args.lastmod) if args.lastmod else None
            urls = iter_path_records(args.paths, lastmod, args.changefreq, args.priority)
        written = generator.generate(urls)
    except (SitemapError, TypeError, OSError) as e:
        logger.error("Sitemap generation failed: %s", e, exc_info=True)
        return 1

    if not written:
        logger.warning("No urls given, nothing written")
    for path in written:
        print(f"Wrote {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
