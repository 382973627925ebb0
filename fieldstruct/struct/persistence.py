"""Saving and loading the elements of a struct, one file per field."""

import gzip
import logging
import os
import pickle
import tempfile
from pathlib import Path

from ..core.config import PersistConfig
from ..core.constants import GZIP_MAGIC, FieldStatus, OverwritePolicy
from ..core.errors import PersistenceError
from ..elements.protocol import is_element
from .results import FieldOutcome, PersistReport

log = logging.getLogger(__name__)

_READ_ERRORS = (OSError, EOFError, pickle.UnpicklingError, AttributeError, ImportError, TypeError, ValueError)


def save_each(elements, directory, config=None):
    """Write each element to ``<directory>/<name><extension>``.

    Every field is attempted independently; a failure is recorded in the
    returned report and never interrupts the remaining fields. Files are
    written to a temporary sibling first and moved into place, so an
    existing file is never left truncated.

    Parameters
    ----------
    elements : mapping of {str: element}
        Field name mapped to the element to save.
    directory : str or path-like
        Target folder.
    config : PersistConfig, optional
        Extension, object key, overwrite policy and compression settings.

    Returns
    -------
    PersistReport
        One outcome per field, in field order.
    """
    config = config or PersistConfig()
    directory = Path(directory)

    if config.create_directory:
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            log.warning("Could not create directory '%s': %s", directory, e)
            reason = f"could not create directory: {e}"
            outcomes = tuple(
                FieldOutcome(name, FieldStatus.FAILED, directory / f"{name}{config.extension}", reason)
                for name in elements
            )
            return PersistReport(directory, outcomes)

    outcomes = []
    for name, element in elements.items():
        outcome = _save_one(name, element, directory, config)
        if outcome.status is FieldStatus.SAVED:
            log.info("Saved field '%s' to '%s'", name, outcome.path)
        elif outcome.status is FieldStatus.SKIPPED:
            log.warning("Skipped field '%s': %s", name, outcome.reason)
        else:
            log.warning("Failed to save field '%s': %s", name, outcome.reason)
        outcomes.append(outcome)

    return PersistReport(directory, tuple(outcomes))


def read_each(directory, names=None, config=None):
    """Read elements saved with :func:`save_each`.

    Parameters
    ----------
    directory : str or path-like
        Folder in which the element files are located.
    names : str or iterable of str, optional
        Field names to read, with or without the extension. If unspecified,
        every file with the configured extension is read, in sorted order.
    config : PersistConfig, optional
        Extension and object key settings.

    Returns
    -------
    dict of {str: element}
        Field name mapped to the loaded element.

    Raises
    ------
    PersistenceError
        If the directory is invalid, no files are found, or a file is missing,
        unreadable or does not hold an element.
    """
    config = config or PersistConfig()
    directory = Path(directory)
    ext = config.extension

    if not directory.is_dir():
        raise PersistenceError(f"Invalid directory '{directory}'", path=directory)

    if names is None:
        paths = sorted(
            p for p in directory.iterdir() if p.is_file() and p.name.endswith(ext) and len(p.name) > len(ext)
        )
        if not paths:
            raise PersistenceError(f"No {ext} files found in the folder '{directory}'", path=directory)
        names = [p.name[: -len(ext)] for p in paths]
    else:
        if isinstance(names, str):
            names = [names]
        names = list(names)
        if not all(isinstance(n, str) for n in names):
            raise TypeError("If specifying file names, pass a string or an iterable of strings")
        if not names:
            raise PersistenceError(f"No file names given for the folder '{directory}'", path=directory)
        names = [n[: -len(ext)] if n.endswith(ext) else n for n in names]
        outside = [n for n in names if not _is_file_name(n)]
        if outside:
            raise PersistenceError(
                f"Invalid field name(s) {', '.join(map(repr, outside))}: not a file name in '{directory}'",
                path=directory,
            )

    elements = {}
    for name in names:
        if name in elements:
            continue
        elements[name] = _read_one(directory / f"{name}{ext}", config)
    log.info("Loaded %d field(s) from '%s'", len(elements), directory)
    return elements


def _save_one(name, element, directory, config):
    path = directory / f"{name}{config.extension}"

    if not _is_file_name(name):
        return FieldOutcome(name, FieldStatus.FAILED, path, "field name is not a valid file name")

    # Record any error against this field; the batch continues.
    try:
        if path.exists():
            if config.overwrite is OverwritePolicy.SKIP:
                return FieldOutcome(name, FieldStatus.SKIPPED, path, "file already exists")
            if config.overwrite is OverwritePolicy.FAIL:
                return FieldOutcome(name, FieldStatus.FAILED, path, "file already exists")
        _write_payload({config.object_key: element}, path, config.high_capacity)
    except Exception as e:
        return FieldOutcome(name, FieldStatus.FAILED, path, f"{type(e).__name__}: {e}")
    return FieldOutcome(name, FieldStatus.SAVED, path)


def _is_file_name(name):
    return Path(name).name == name and name not in (".", "..")


def _write_payload(payload, path, high_capacity):
    # Keep the temp file in the target directory so os.replace stays atomic.
    fd, tmp = tempfile.mkstemp(prefix=f".{path.stem}_", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as raw:
            if high_capacity:
                with gzip.GzipFile(fileobj=raw, mode="wb") as f:
                    pickle.dump(payload, f, protocol=pickle.HIGHEST_PROTOCOL)
            else:
                pickle.dump(payload, raw)
        os.replace(tmp, path)
    finally:
        if os.path.exists(tmp):
            os.unlink(tmp)


def _read_one(path, config):
    if not path.is_file():
        raise PersistenceError(f"Invalid field name, or nonexistent file '{path.name}'", path=path)

    try:
        with open(path, "rb") as raw:
            compressed = raw.read(len(GZIP_MAGIC)) == GZIP_MAGIC
            raw.seek(0)
            if compressed:
                with gzip.GzipFile(fileobj=raw, mode="rb") as f:
                    payload = pickle.load(f)
            else:
                payload = pickle.load(raw)
    except _READ_ERRORS as e:
        raise PersistenceError(f"Unreadable file '{path.name}': {e}", path=path) from e

    if not isinstance(payload, dict) or config.object_key not in payload:
        raise PersistenceError(f"File '{path.name}' does not contain an element under '{config.object_key}'", path=path)
    element = payload[config.object_key]
    if not is_element(element):
        raise PersistenceError(
            f"File '{path.name}' holds a {type(element).__name__}, which is not a valid element", path=path
        )
    return element
