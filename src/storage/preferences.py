"""Theme preference slot."""

from src.storage.kv import KeyValueStore

THEMES = ("dark", "light")


class ThemePreference:
    """Reads and writes the ``"dark"``/``"light"`` theme preference.

    Any missing or unrecognized stored value reads as the default theme.
    """

    def __init__(self, kv: KeyValueStore, key: str = "theme", default: str = "dark") -> None:
        if default not in THEMES:
            raise ValueError(f"Unknown theme: '{default}'. Supported: {', '.join(THEMES)}")
        self._kv = kv
        self._key = key
        self._default = default

    def get(self) -> str:
        value = self._kv.get(self._key)
        return value if value in THEMES else self._default

    def set(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: '{theme}'. Supported: {', '.join(THEMES)}")
        self._kv.set(self._key, theme)

    def toggle(self) -> str:
        """Flip between dark and light, returning the new theme."""
        theme = "light" if self.get() == "dark" else "dark"
        self.set(theme)
        return theme
