"""Common literal values used across sitepages.

These constants keep thresholds and sentinel values centralized so the
renderers, templates, and tests can import the same values without drifting.
Intended for internal use within the sitepages package.

Examples
--------
>>> from sitepages import _constants
>>> _constants.AUTO_INDEX_THRESHOLD
100
>>> _constants.SEARCH_INDEX_TEMPLATE.format(lang="es")
'search-es.json'
"""

AUTO_INDEX_THRESHOLD = 100
PREVIEW_LENGTH_CHARS = 100
DEFAULT_LANG = "en"
DEFAULT_TAG_GAME = "h1"
UNRESOLVED_TITLE = "[Unresolved]"
SEARCH_INDEX_TEMPLATE = "search-{lang}.json"
