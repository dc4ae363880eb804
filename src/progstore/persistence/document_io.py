"""Document I/O — reads and writes the save document as JSON.

Writes go to a temporary file that then replaces the target, so a
crash mid-write never leaves a truncated save behind.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from progstore.models.save_document import SaveDocument
from progstore.persistence.errors import CorruptSaveDocument, SaveFileMissing, SaveWriteError

log = logging.getLogger(__name__)


# ===================================================================
# Public API
# ===================================================================


def read_document(path: str | Path) -> SaveDocument:
    """Read and validate the save document at *path*.

    Raises:
        SaveFileMissing: The file does not exist.
        CorruptSaveDocument: The file cannot be read, is not JSON, or
            does not fit the :class:`SaveDocument` schema.
    """
    save_file = Path(path)
    if not save_file.exists():
        raise SaveFileMissing(str(path))

    try:
        raw = json.loads(save_file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        raise CorruptSaveDocument(str(path), str(exc)) from exc

    if not isinstance(raw, dict):
        raise CorruptSaveDocument(str(path), f"expected an object, got {type(raw).__name__}")

    try:
        return SaveDocument.model_validate(raw)
    except ValidationError as exc:
        raise CorruptSaveDocument(str(path), f"{exc.error_count()} schema errors") from exc


def write_document(path: str | Path, document: SaveDocument) -> None:
    """Serialize *document* and atomically replace the file at *path*.

    Raises:
        SaveWriteError: The file could not be written.
    """
    out = Path(path)
    tmp = out.with_name(out.name + ".tmp")
    text = json.dumps(document.model_dump(mode="json"), indent=2, ensure_ascii=False)
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(text, encoding="utf-8")
        tmp.replace(out)
    except OSError as exc:
        try:
            tmp.unlink(missing_ok=True)
        except OSError:
            log.warning("Could not remove temporary save file %s", tmp)
        raise SaveWriteError(str(path), str(exc)) from exc
    log.debug("Save document written to %s (%d bytes)", out, len(text))


def delete_document(path: str | Path) -> bool:
    """Remove the save file at *path*. Returns whether a file was removed."""
    save_file = Path(path)
    if not save_file.exists():
        return False
    save_file.unlink()
    log.info("Save file deleted: %s", save_file)
    return True
