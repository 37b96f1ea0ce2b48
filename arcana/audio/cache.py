"""Process-wide cache of decoded phrase audio."""

from __future__ import annotations

from typing import Iterator

from arcana.audio.assets import AudioAsset


class PhraseCache:
    """Append-only map of phrase key to decoded audio.

    Entries are never evicted; only the fixed set of prompt phrases is
    inserted, so growth is bounded by the number of distinct keys.
    """

    def __init__(self) -> None:
        self._entries: dict[str, AudioAsset] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def get(self, key: str) -> AudioAsset | None:
        return self._entries.get(key)

    def insert_if_absent(self, key: str, asset: AudioAsset) -> AudioAsset:
        """Store ``asset`` unless ``key`` exists; return the cached value."""

        return self._entries.setdefault(key, asset)


_SHARED_CACHE = PhraseCache()


def get_phrase_cache() -> PhraseCache:
    """Return the cache shared by every ritual in this process."""

    return _SHARED_CACHE


__all__ = ["PhraseCache", "get_phrase_cache"]
