from __future__ import annotations

import logging
from pathlib import Path

from .models import Writing

logger = logging.getLogger(__name__)

WRITING_SUFFIX = ".txt"
DEFAULT_FILENAME = "1" + WRITING_SUFFIX


class WritingStoreError(Exception):
    pass


class WritingStore:
    """Flat directory of numbered writings: ``1.txt``, ``2.txt``, ..."""

    def __init__(self, directory: Path):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def ensure_directory(self) -> None:
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise WritingStoreError(f"Failed to create directory {self._directory}: {exc}") from exc

    def next_filename(self) -> str:
        try:
            entries = list(self._directory.iterdir())
        except OSError as exc:
            logger.error("Failed to read directory %s: %s", self._directory, exc)
            return DEFAULT_FILENAME

        numbers = [n for n in (_number_from_name(entry.name) for entry in entries) if n is not None]
        if not numbers:
            return DEFAULT_FILENAME
        return f"{max(numbers) + 1}{WRITING_SUFFIX}"

    def save(self, text: str) -> Writing | None:
        filename = self.next_filename()
        path = self._directory / filename
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to save the file %s: %s", path, exc)
            return None
        logger.info("Saved writing to %s", path)
        return Writing(number=int(Path(filename).stem), path=path, text=text)

    def read(self, path: Path) -> str | None:
        try:
            return Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to read file %s: %s", path, exc)
            return None

    def load(self, path: Path) -> Writing | None:
        path = Path(path)
        number = _number_from_name(path.name)
        text = self.read(path)
        if number is None or text is None:
            return None
        return Writing(number=number, path=path, text=text)

    def list_writings(self) -> list[Writing]:
        try:
            entries = list(self._directory.iterdir())
        except OSError as exc:
            logger.error("Failed to read directory %s: %s", self._directory, exc)
            return []

        numbered: list[tuple[int, Path]] = []
        for entry in entries:
            if entry.suffix != WRITING_SUFFIX or not entry.is_file():
                continue
            number = _number_from_name(entry.name)
            if number is None:
                logger.debug("Skipping %s: not a numbered writing", entry.name)
                continue
            numbered.append((number, entry))

        writings: list[Writing] = []
        for number, path in sorted(numbered):
            text = self.read(path)
            if text is None:
                continue
            writings.append(Writing(number=number, path=path, text=text))
        return writings


def trim_text(text: str, length: int = 30) -> str:
    if len(text) > length:
        return text[:length] + "..."
    return text


def _number_from_name(name: str) -> int | None:
    stem = Path(name).stem
    if not (stem.isascii() and stem.isdigit()):
        return None
    return int(stem)
