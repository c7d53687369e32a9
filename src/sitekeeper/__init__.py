"""
SiteKeeper - Site recovery tooling
Single-use recovery mode keys for regaining administrative access.
"""

__version__ = "0.1.0"

from sitekeeper.core.config import settings
from sitekeeper.core.logging import get_logger

__all__ = ["settings", "get_logger", "__version__"]
