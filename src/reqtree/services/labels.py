"""Configuration-backed localization lookup.

Labels are read from ``[labels.<locale>]`` tables. Lookups fall back to
the default locale, and finally to ``LOCALIZE_TAG + key``.
"""

from __future__ import annotations

from typing import Any

from reqtree.services import LOCALIZE_TAG


class LabelCatalog:
    """Label lookup over ``{locale: {key: text}}`` tables.

    Attributes:
        default_locale: Locale used when none is given or a key is missing.
        missing: Keys looked up with ``warn=True`` that had no translation.
    """

    def __init__(self, tables: dict[str, dict[str, str]], default_locale: str = "en_GB") -> None:
        self._tables = tables
        self.default_locale = default_locale
        self.missing: set[tuple[str, str]] = set()

    @classmethod
    def from_config(cls, config: Any) -> LabelCatalog:
        """Build from a ``ConfigLoader``."""
        return cls(
            tables=config.section("labels"),
            default_locale=config.get("locales.default", "en_GB"),
        )

    def label(self, key: str, locale: str | None = None, warn: bool = True) -> str:
        locale = locale or self.default_locale
        for candidate in (locale, self.default_locale):
            text = self._tables.get(candidate, {}).get(key)
            if text is not None:
                return text
        if warn:
            self.missing.add((locale, key))
        return f"{LOCALIZE_TAG}{key}"

