"""Filesystem storage for match exports.

Saves and loads JSON documents organized by match ID under a
match-centric directory structure::

    base_dir/
      matches/
        {match_id}/
          events.json
          statistics.json
          events-{label}.json.gz
"""

import gzip
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class ExportStorage:
    """JSON save/load/exists filesystem layer.

    ``archive`` documents are gzip-compressed snapshots of an export, kept
    side by side under a caller-chosen label (e.g. ``half-time``).

    Usage::

        storage = ExportStorage("data")
        path = storage.save(store.export_events(), match_id="m1")
        text = storage.load(match_id="m1")
    """

    # Kind -> filename template
    KINDS: dict[str, str] = {
        "export": "events.json",
        "statistics": "statistics.json",
        "archive": "events-{label}.json.gz",
    }

    # Kinds that require a label parameter
    _REQUIRES_LABEL = {"archive"}
    _COMPRESSED = {"archive"}

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir)

    def save(
        self,
        text: str,
        match_id: str,
        kind: str = "export",
        label: str | None = None,
    ) -> Path:
        """Write a document to disk, replacing any previous one.

        Args:
            text: JSON document to save.
            match_id: Match the document belongs to.
            kind: One of the keys in KINDS.
            label: Required for ``archive``.

        Returns:
            Path to the written file.

        Raises:
            ValueError: If kind is invalid, label is missing when required,
                or match_id is not a plain name.
        """
        file_path = self._build_path(match_id, kind, label)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        data = text.encode("utf-8")
        if kind in self._COMPRESSED:
            data = gzip.compress(data)
        file_path.write_bytes(data)
        logger.info("Saved %s for match %s to %s", kind, match_id, file_path)
        return file_path

    def load(
        self,
        match_id: str,
        kind: str = "export",
        label: str | None = None,
    ) -> str:
        """Read a saved document back as text.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If kind is invalid or label is missing.
        """
        file_path = self._build_path(match_id, kind, label)
        if not file_path.exists():
            raise FileNotFoundError(
                f"No saved {kind} for match {match_id}, "
                f"label={label!r}: {file_path}"
            )
        data = file_path.read_bytes()
        if kind in self._COMPRESSED:
            data = gzip.decompress(data)
        return data.decode("utf-8")

    def exists(
        self,
        match_id: str,
        kind: str = "export",
        label: str | None = None,
    ) -> bool:
        return self._build_path(match_id, kind, label).exists()

    def list_match_files(self, match_id: str) -> list[Path]:
        """Return all files saved for a given match, sorted by name.

        Returns an empty list if the match directory does not exist.
        """
        match_dir = self._match_dir(match_id)
        if not match_dir.exists():
            return []
        return sorted(p for p in match_dir.iterdir() if p.is_file())

    def _build_path(
        self,
        match_id: str,
        kind: str,
        label: str | None,
    ) -> Path:
        """Build the filesystem path for a given document.

        Raises:
            ValueError: If kind is not recognized, if ``archive`` is used
                without a label, or if match_id or label is not a plain
                name.
        """
        if kind not in self.KINDS:
            raise ValueError(
                f"Unknown kind {kind!r}. Valid kinds: {list(self.KINDS.keys())}"
            )
        if kind in self._REQUIRES_LABEL and not label:
            raise ValueError(f"kind {kind!r} requires a label parameter.")
        if label is not None and _is_unsafe_name(label):
            raise ValueError(f"Invalid label {label!r}: must be a plain name.")
        filename = self.KINDS[kind].format(label=label)
        return self._match_dir(match_id) / filename

    def _match_dir(self, match_id: str) -> Path:
        """Directory for one match, guaranteed to sit under ``matches/``.

        Raises:
            ValueError: If match_id is empty, contains a path separator or
                is ``.``/``..``.
        """
        if _is_unsafe_name(match_id):
            raise ValueError(
                f"Invalid match_id {match_id!r}: must be a plain name "
                "without path separators."
            )
        matches_dir = self.base_dir / "matches"
        match_dir = matches_dir / match_id
        if matches_dir.resolve() not in match_dir.resolve().parents:
            raise ValueError(f"match_id {match_id!r} escapes {matches_dir}")
        return match_dir


def _is_unsafe_name(name: str) -> bool:
    return (
        not name
        or name in (".", "..")
        or "/" in name
        or "\\" in name
        or "\x00" in name
    )
