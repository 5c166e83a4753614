"""Edit applier: splice sorted edits into source text and write the file back."""

import logging
from collections.abc import Sequence
from pathlib import Path

from cairo_lint.domain.entities import TextEdit

logger = logging.getLogger(__name__)


class TextEditApplier:
    """Writes fixed sources to disk unless ``dry_run`` is set."""

    def __init__(self, dry_run: bool = False) -> None:
        self._dry_run = dry_run

    @staticmethod
    def splice(source: str, edits: Sequence[TextEdit]) -> str:
        """Apply edits sorted by start, in one left-to-right pass."""
        pieces: list[str] = []
        cursor = 0
        for edit in edits:
            if edit.span.start < cursor:
                raise ValueError(f"Edit at {edit.span.start} overlaps a previous edit ending at {cursor}")
            pieces.append(source[cursor : edit.span.start])
            pieces.append(edit.text)
            cursor = edit.span.end
        pieces.append(source[cursor:])
        return "".join(pieces)

    def apply(self, path: str, source: str, edits: Sequence[TextEdit]) -> str:
        new_source = self.splice(source, edits)
        if self._dry_run or new_source == source:
            return new_source
        Path(path).write_text(new_source, encoding="utf-8")
        logger.info("Wrote %d edit(s) to %s", len(edits), path)
        return new_source
