# helpers/errors.py
# -----------------------------------------------------
# Exceptions raised by the sitemap helpers.
# Non-record input raises the built-in TypeError, I/O failures OSError.
# -----------------------------------------------------


class SitemapError(Exception):
    """Base class for sitemap generation errors."""


class ValidationError(SitemapError, ValueError):
    """A Url field is out of range or malformed."""


class ConfigurationError(SitemapError, ValueError):
    """The generator was given an empty target dir or unknown/invalid options."""
