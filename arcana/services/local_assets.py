"""Pre-rendered audio assets stored on disk."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from fastapi.concurrency import run_in_threadpool

from arcana.audio.assets import AudioAsset, AudioAssetError
from arcana.config.settings import settings

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_\-]+$")


class LocalAssetLoader:
    """Load ``<key>.wav`` from the assets directory, resampled for playback."""

    def __init__(
        self,
        assets_dir: Path = settings.audio.assets_dir,
        *,
        sample_rate: int = settings.audio.sample_rate,
    ) -> None:
        self._assets_dir = Path(assets_dir)
        self._sample_rate = sample_rate

    def path_for(self, key: str) -> Path | None:
        if not _SAFE_KEY.match(key or ""):
            return None
        return self._assets_dir / f"{key}.wav"

    async def load(self, key: str) -> AudioAsset | None:
        path = self.path_for(key)
        if path is None:
            logger.warning("Rejected audio asset key %r", key)
            return None
        if not path.is_file():
            logger.info("Local audio asset not found: %s", path.name)
            return None
        return await run_in_threadpool(self._read, path, key)

    def _read(self, path: Path, key: str) -> AudioAsset | None:
        try:
            asset = AudioAsset.from_wav_bytes(path.read_bytes(), label=key)
        except (OSError, AudioAssetError) as exc:
            logger.warning("Failed to load local audio %s: %s", path.name, exc)
            return None
        return asset.resampled(self._sample_rate)


__all__ = ["LocalAssetLoader"]
