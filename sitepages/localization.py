"""Small lookup tables for UI strings rendered around page content."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from ._constants import DEFAULT_LANG

Localizations = cabc.Mapping[str, cabc.Mapping[str, str]]

PAGE_LOCALIZATIONS: Localizations = {
    "thanksHeadingText": {
        "en": "Acknowledgements",
        "es": "Agradecimientos",
    },
    "stubNotice": {
        "en": "This page is a stub and may be incomplete.",
        "es": "Esta página es un esbozo y puede estar incompleta.",
    },
    "otherLangs": {
        "en": "Other languages",
        "es": "Otros idiomas",
    },
    "contents": {
        "en": "Contents",
        "es": "Contenido",
    },
    "children": {
        "en": "Child pages",
        "es": "Páginas hijas",
    },
    "related": {
        "en": "Related",
        "es": "Relacionado",
    },
    "tagParents": {
        "en": "Parent tags",
        "es": "Etiquetas padre",
    },
    "tagChildren": {
        "en": "Child tags",
        "es": "Etiquetas hijas",
    },
    "workflowFrom": {
        "en": "Created by",
        "es": "Creado por",
    },
    "workflowTo": {
        "en": "Used to create",
        "es": "Usado para crear",
    },
}


def localizer(
    localizations: Localizations, lang: str
) -> typ.Callable[[str], str]:
    """Return a lookup function bound to ``lang``.

    Keys missing a translation for ``lang`` fall back to the default language,
    and unknown keys raise ``KeyError`` so typos surface immediately.
    """

    def localize(key: str) -> str:
        entry = localizations[key]
        return entry.get(lang) or entry[DEFAULT_LANG]

    return localize


__all__ = ["PAGE_LOCALIZATIONS", "Localizations", "localizer"]
