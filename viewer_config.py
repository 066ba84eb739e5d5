"""
Viewer configuration.

Defaults match the browser layout. Every field can be overridden
through an ARCHIVE_BROWSER_<FIELD> environment variable, e.g.
ARCHIVE_BROWSER_OVERSCAN=8.
"""

import os
from dataclasses import dataclass, fields, replace
from typing import Mapping

from archive_logging import get_logger
from list_view import SortKey

logger = get_logger('config')

ENV_PREFIX = 'ARCHIVE_BROWSER_'

# Row heights in pixels; a search snippet adds one line under the title.
DEFAULT_ROW_HEIGHT = 76
DEFAULT_SNIPPET_ROW_HEIGHT = 96
DEFAULT_OVERSCAN = 5

SORT_VALUES = [k.value for k in SortKey]


@dataclass(frozen=True)
class ViewerConfig:
    row_height: int = DEFAULT_ROW_HEIGHT
    snippet_row_height: int = DEFAULT_SNIPPET_ROW_HEIGHT
    overscan: int = DEFAULT_OVERSCAN
    snippet_before: int = 25
    snippet_after: int = 45
    default_sort: str = 'date-desc'
    search_debounce_ms: int = 250
    search_limit: int = 500
    index_dir: str | None = None
    log_level: str = 'INFO'

    def row_height_for(self, show_snippets: bool) -> int:
        """Row height for a list that does (or does not) show search snippets."""
        return self.snippet_row_height if show_snippets else self.row_height

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> 'ViewerConfig':
        """Build a config from defaults plus ARCHIVE_BROWSER_* overrides.

        Values that cannot be converted to the field's type are ignored.
        """
        environ = os.environ if environ is None else environ
        config = cls()
        overrides = {}

        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            default = getattr(config, f.name)
            if isinstance(default, int):
                try:
                    overrides[f.name] = int(raw)
                except ValueError:
                    logger.warning('Ignoring %s%s=%r: not an integer', ENV_PREFIX, f.name.upper(), raw)
            elif f.name == 'default_sort':
                if raw in SORT_VALUES:
                    overrides[f.name] = raw
                else:
                    logger.warning('Ignoring %s%s=%r: expected one of %s',
                                   ENV_PREFIX, f.name.upper(), raw, ', '.join(SORT_VALUES))
            elif f.name == 'index_dir':
                overrides[f.name] = raw or None
            else:
                overrides[f.name] = raw

        return replace(config, **overrides)
