"""
Catalog Loader (libsodium.js wrapper tree -> Catalog).

Expected layout of a source tree:
    <source>/wrapper/symbols/*.json     one descriptor per function
    <source>/wrapper/constants.json     array of {name, type}

Descriptor files are read concurrently and joined before merging and
sorting. The first unreadable or malformed file aborts the whole load.
"""

import json
import logging
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, TypeVar, Union

from sodium_typegen.errors import AcquisitionError, CatalogParseError
from sodium_typegen.model import Catalog, Constant, Declarations, Symbol
from sodium_typegen.serialization import constant_from_dict, symbol_from_dict


logger = logging.getLogger(__name__)

READY_CONSTANT = Constant(name="ready", type="Promise<void>")

_Named = TypeVar("_Named", Symbol, Constant)


def symbols_dir(source: Path) -> Path:
    return source / "wrapper" / "symbols"


def constants_file(source: Path) -> Path:
    return source / "wrapper" / "constants.json"


def check_source(source: Union[str, Path]) -> Path:
    """
    Verify that a directory looks like a libsodium.js source tree.

    Raises:
        AcquisitionError: If the symbols directory or constants file is missing
    """
    source = Path(source)
    if not symbols_dir(source).is_dir():
        raise AcquisitionError(f"Symbols directory not found: {symbols_dir(source)}")
    if not constants_file(source).is_file():
        raise AcquisitionError(f"Constants file not found: {constants_file(source)}")
    return source


def _read_json(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise CatalogParseError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise AcquisitionError(f"Could not read {path}: {e}") from e


def parse_symbol_file(path: Path) -> Symbol:
    """
    Parse one symbol descriptor file.

    Raises:
        CatalogParseError: If the file is not valid JSON or lacks required fields
    """
    logger.debug("Reading symbol descriptor %s", path.name)
    try:
        return symbol_from_dict(_read_json(path))
    except CatalogParseError as e:
        if str(path) in str(e):
            raise
        raise CatalogParseError(f"{path}: {e}") from e


def _sorted_unique(entries: Iterable[_Named], what: str) -> List[_Named]:
    ordered = sorted(entries, key=lambda entry: entry.name)
    for previous, current in zip(ordered, ordered[1:]):
        if previous.name == current.name:
            raise CatalogParseError(f"Duplicate {what} name: {current.name}")
    return ordered


def _join_fail_fast(futures: List["Future[Symbol]"]) -> List[Symbol]:
    done, pending = wait(futures, return_when=FIRST_EXCEPTION)
    for future in done:
        error = future.exception()
        if error is not None:
            for other in pending:
                other.cancel()
            raise error
    return [future.result() for future in futures]


def load_symbols(
    source: Path,
    additional: Sequence[Symbol] = (),
    max_workers: Optional[int] = None,
) -> List[Symbol]:
    """
    Read every descriptor under wrapper/symbols, merge the additional
    symbols, and sort by name.

    Args:
        source: libsodium.js source tree
        additional: Symbols with no descriptor file
        max_workers: Thread pool size (None lets the executor decide)

    Returns:
        Sorted list of unique symbols
    """
    paths = sorted(p for p in symbols_dir(source).iterdir() if p.is_file())
    logger.info("Loading %d symbol descriptors from %s", len(paths), symbols_dir(source))

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(parse_symbol_file, path) for path in paths]
        symbols = _join_fail_fast(futures)

    return _sorted_unique(list(symbols) + list(additional), "symbol")


def load_constants(source: Path) -> List[Constant]:
    """Read wrapper/constants.json, add the synthetic `ready` constant, and sort."""
    path = constants_file(source)
    raw = _read_json(path)
    if not isinstance(raw, list):
        raise CatalogParseError(f"{path}: expected a JSON array of constants")

    try:
        constants = [constant_from_dict(entry) for entry in raw]
    except CatalogParseError as e:
        raise CatalogParseError(f"{path}: {e}") from e

    constants.append(READY_CONSTANT)
    return _sorted_unique(constants, "constant")


def load_catalog(
    source: Union[str, Path],
    declarations: Declarations,
    version: str,
    max_workers: Optional[int] = None,
) -> Catalog:
    """
    Load the complete catalog of one libsodium.js source tree.

    Args:
        source: libsodium.js source tree (checked first)
        declarations: Supplies the additional utility symbols
        version: Version label stored on the catalog
        max_workers: Thread pool size for descriptor reads

    Returns:
        Catalog with sorted symbols and constants

    Raises:
        AcquisitionError: If the tree is incomplete or unreadable
        CatalogParseError: If any descriptor is malformed
    """
    source = check_source(source)
    symbols = load_symbols(source, declarations.additional_symbols, max_workers=max_workers)
    constants = load_constants(source)
    logger.info("Loaded %d symbols and %d constants", len(symbols), len(constants))
    return Catalog(version=version, symbols=symbols, constants=constants)


__all__ = [
    "READY_CONSTANT",
    "check_source",
    "parse_symbol_file",
    "load_symbols",
    "load_constants",
    "load_catalog",
]
