"""Load and validate site configuration YAML for sitepages builds.

This subpackage parses the project's ``site.yaml`` file, applies defaults,
resolves directories relative to the file, and produces a
:class:`SiteConfig` dataclass that the CLI consumes. The primary entry point
is :func:`load_site_config`.

Examples
--------
>>> from pathlib import Path
>>> from sitepages.config import load_site_config
>>> site = load_site_config(Path("site.yaml"))  # doctest: +SKIP
>>> site.base_url  # doctest: +SKIP
'https://example.org'
"""

from .loader import load_site_config
from .models import SiteConfig, SiteConfigError

__all__ = ["SiteConfig", "SiteConfigError", "load_site_config"]
