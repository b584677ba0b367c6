"""JSON message catalogues for user-facing search text."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any


class I18nService:
    def __init__(self, *, locales_path: str | Path | None = None, default_locale: str = "en") -> None:
        self.locales_path = Path(locales_path or Path(__file__).with_name("locales"))
        self.default_locale = default_locale.lower()

    def resolve_locale(self, language_code: str | None) -> str:
        """Pick a catalogue for a client language tag such as ``ja-JP``."""

        if not language_code:
            return self.default_locale
        candidate = language_code.replace("_", "-").split("-", 1)[0].lower()
        if candidate and self._catalogue(candidate):
            return candidate
        return self.default_locale

    def gettext(self, key: str, *, locale: str | None = None, **kwargs: Any) -> str:
        loc = (locale or self.default_locale).lower()
        text = self._catalogue(loc).get(key)
        if text is None and loc != self.default_locale:
            text = self._catalogue(self.default_locale).get(key)
        if text is None:
            text = key
        return text.format(**kwargs) if kwargs else text

    def _catalogue(self, locale: str) -> dict[str, str]:
        return _load_catalogue(self.locales_path, locale)


@lru_cache(maxsize=32)
def _load_catalogue(locales_path: Path, locale: str) -> dict[str, str]:
    file_path = locales_path / f"{locale}.json"
    if not file_path.exists():
        return {}
    with file_path.open("r", encoding="utf-8") as fp:
        return json.load(fp)


__all__ = ["I18nService"]
