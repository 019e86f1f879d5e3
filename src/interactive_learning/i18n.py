"""Translation lookup for display strings."""

from functools import lru_cache

from interactive_learning.config import load_translations


@lru_cache(maxsize=1)
def _tables() -> dict:
    return load_translations()


def _strings_for(language: str, tables: dict) -> dict[str, str]:
    wanted = language.strip().casefold()
    if not wanted:
        return {}
    for name, table in tables.items():
        names = [name, *table.get("aliases", [])]
        if any(str(n).casefold() in wanted for n in names):
            return table.get("strings", {})
    return {}


def translate(text: str, language: str, tables: dict | None = None) -> str:
    """Translate ``text`` into ``language``, falling back to ``text`` itself."""
    strings = _strings_for(language, _tables() if tables is None else tables)
    return strings.get(text, text)
