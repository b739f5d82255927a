# config_paths.py
# -----------------------------------------------------
# Default filesystem locations used by the sitemap tool.
# Relative to the working directory; nothing is created on import.
# -----------------------------------------------------

from pathlib import Path

# Sitemaps are served from the static folder by default
STATIC_DIR: Path = Path("static")
DEFAULT_OUTPUT_DIR: Path = STATIC_DIR

LOG_DIR: Path = Path("logs")
LOG_FILE_NAME = "sitemap.log"

# Environment variable holding the default log level
LOG_LEVEL_ENV = "SITEMAP_LOG_LEVEL"
