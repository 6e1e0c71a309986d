"""Media stores — resolve media reference ids to stored blobs.

Two implementations ship with the SDK:

  - InMemoryMediaStore: dict-backed; used by tests and by callers that
    receive media in the same request as the survey response
  - DirectoryMediaStore: one file per media item under a directory.  The
    media id is the file stem, the content type is guessed from the file
    extension, and an optional ``<stem>.meta.yaml`` sidecar may record
    ``width``, ``height`` and ``duration_ms``; an unreadable sidecar or a
    non-integer entry is logged and treated as unknown

A reference may name the file with or without its extension; either way
the resolved blob carries the stem as its id.
"""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path

import yaml

from survey_rulesets.interfaces import MediaStore
from survey_rulesets.models.media import MediaBlob
from survey_rulesets.store import load_yaml

logger = logging.getLogger(__name__)

_META_SUFFIX = ".meta.yaml"
_META_FIELDS = ("width", "height", "duration_ms")


class InMemoryMediaStore(MediaStore):
    """Media blobs held in a dict keyed by reference id."""

    def __init__(self, blobs: dict[str, MediaBlob] | None = None) -> None:
        self._blobs: dict[str, MediaBlob] = dict(blobs or {})

    def add(self, blob: MediaBlob, *, reference: str | None = None) -> None:
        """Register ``blob`` under ``reference`` (defaults to the blob id)."""
        self._blobs[reference or blob.id] = blob

    def resolve(self, reference: str) -> MediaBlob | None:
        return self._blobs.get(reference)

    def __len__(self) -> int:
        return len(self._blobs)


class DirectoryMediaStore(MediaStore):
    """Media blobs stored as files in a single directory."""

    def __init__(self, media_dir: str | Path) -> None:
        self._base = Path(media_dir)

    def resolve(self, reference: str) -> MediaBlob | None:
        path = self._find(reference)
        if path is None:
            logger.debug("No media file for reference %r in %s", reference, self._base)
            return None

        stem = path.name.split(".", 1)[0]
        content_type, _ = mimetypes.guess_type(path.name)
        meta = self._load_meta(stem)
        return MediaBlob(
            id=stem,
            content_type=content_type or "application/octet-stream",
            size=path.stat().st_size,
            width=meta.get("width"),
            height=meta.get("height"),
            duration_ms=meta.get("duration_ms"),
        )

    def _find(self, reference: str) -> Path | None:
        """Locate the media file for a reference, refusing path traversal."""
        if not reference or "/" in reference or "\\" in reference or reference.startswith("."):
            return None
        exact = self._base / reference
        if exact.is_file() and not exact.name.endswith(_META_SUFFIX):
            return exact
        if not self._base.is_dir():
            return None
        for candidate in sorted(self._base.iterdir()):
            if candidate.name.endswith(_META_SUFFIX) or not candidate.is_file():
                continue
            if candidate.name.split(".", 1)[0] == reference:
                return candidate
        return None

    def _load_meta(self, stem: str) -> dict:
        """Read the sidecar measurements; malformed entries are logged and dropped."""
        meta_path = self._base / f"{stem}{_META_SUFFIX}"
        if not meta_path.exists():
            return {}
        try:
            raw = load_yaml(meta_path)
        except yaml.YAMLError as exc:
            logger.warning("Ignoring unreadable media sidecar %s: %s", meta_path.name, exc)
            return {}
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring media sidecar %s: not a mapping", meta_path.name)
            return {}

        meta = {}
        for key in _META_FIELDS:
            value = raw.get(key)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                logger.warning(
                    "Ignoring %s=%r in media sidecar %s", key, value, meta_path.name
                )
                continue
            meta[key] = value
        return meta
