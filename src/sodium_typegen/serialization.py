"""
Serialization helpers for catalog objects (Symbol, Constant, Declarations, Catalog).

Descriptors arrive as JSON objects in the libsodium.js repository; the
hand-maintained declaration tables ship as YAML inside this package. Both
pass through the explicit dict converters below, which are the only place
that knows the on-disk field names.
"""
from __future__ import annotations

import json
from importlib import resources
from typing import Any, Dict, FrozenSet, List

import yaml

from sodium_typegen.errors import CatalogParseError
from sodium_typegen.model import (
    Catalog,
    Constant,
    Declarations,
    RecordField,
    Symbol,
    SymbolIO,
)
from sodium_typegen.resolver import resolve_symbol_shape, shape_to_dict


DATA_PACKAGE = "sodium_typegen.data"
DECLARATIONS_FILE = "declarations.yaml"
SUMO_ONLY_FILE = "sumo_only_symbols.yaml"


def _require_mapping(d: Any, what: str) -> Dict[str, Any]:
    if not isinstance(d, dict):
        raise CatalogParseError(f"{what} must be an object, got {type(d).__name__}")
    return d


def _require_name(d: Dict[str, Any], what: str) -> str:
    name = d.get("name")
    if not isinstance(name, str) or not name:
        raise CatalogParseError(f"{what} is missing a 'name'")
    return name


def _require_list(d: Dict[str, Any], key: str, owner: str) -> List[Any]:
    value = d.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise CatalogParseError(f"'{key}' of {owner} must be a list")
    return value


def io_from_dict(d: Any, owner: str = "symbol") -> SymbolIO:
    d = _require_mapping(d, f"IO entry of {owner}")
    name = _require_name(d, f"IO entry of {owner}")
    token = d.get("type")
    if not isinstance(token, str):
        raise CatalogParseError(f"IO entry '{name}' of {owner} is missing a 'type'")
    return SymbolIO(name=name, type=token, optional=bool(d.get("optional", False)), size=d.get("size"))


def io_to_dict(io: SymbolIO) -> Dict[str, Any]:
    d: Dict[str, Any] = {"name": io.name, "type": io.type}
    if io.optional:
        d["optional"] = True
    if io.size is not None:
        d["size"] = io.size
    return d


def symbol_from_dict(d: Any) -> Symbol:
    """
    Build a Symbol from a catalog descriptor.

    The return shape is classified here, once.

    Raises:
        CatalogParseError: If required fields are missing or malformed
    """
    d = _require_mapping(d, "Symbol descriptor")
    name = _require_name(d, "Symbol descriptor")

    return_expr = d.get("return")
    if return_expr is not None and not isinstance(return_expr, str):
        raise CatalogParseError(f"'return' of symbol '{name}' must be a string")

    return Symbol(
        name=name,
        inputs=[io_from_dict(io, name) for io in _require_list(d, "inputs", name)],
        outputs=[io_from_dict(io, name) for io in _require_list(d, "outputs", name)],
        return_expr=return_expr,
        return_shape=resolve_symbol_shape(return_expr, d.get("return_shape")),
        dependencies=list(_require_list(d, "dependencies", name)),
        assert_retval=list(_require_list(d, "assert_retval", name)),
        no_output_format=bool(d.get("noOutputFormat", False)),
        target=d.get("target"),
        type=d.get("type", "function"),
    )


def symbol_to_dict(s: Symbol) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "name": s.name,
        "type": s.type,
        "inputs": [io_to_dict(io) for io in s.inputs],
        "outputs": [io_to_dict(io) for io in s.outputs],
        "return_shape": shape_to_dict(s.return_shape),
    }
    if s.return_expr is not None:
        d["return"] = s.return_expr
    if s.dependencies:
        d["dependencies"] = s.dependencies
    if s.assert_retval:
        d["assert_retval"] = s.assert_retval
    if s.no_output_format:
        d["noOutputFormat"] = True
    if s.target is not None:
        d["target"] = s.target
    return d


def constant_from_dict(d: Any) -> Constant:
    d = _require_mapping(d, "Constant descriptor")
    name = _require_name(d, "Constant descriptor")
    token = d.get("type")
    if not isinstance(token, str):
        raise CatalogParseError(f"Constant '{name}' is missing a 'type'")
    return Constant(name=name, type=token)


def constant_to_dict(c: Constant) -> Dict[str, Any]:
    return {"name": c.name, "type": c.type}


def record_field_from_dict(d: Any, owner: str) -> RecordField:
    d = _require_mapping(d, f"Field of record {owner}")
    name = _require_name(d, f"Field of record {owner}")
    token = d.get("type")
    if not isinstance(token, str):
        raise CatalogParseError(f"Field '{name}' of record {owner} is missing a 'type'")
    return RecordField(name=name, type=token)


def declarations_from_dict(d: Any) -> Declarations:
    d = _require_mapping(d, "Declarations")
    records = {
        record_name: [record_field_from_dict(f, record_name) for f in fields]
        for record_name, fields in (d.get("records") or {}).items()
    }
    return Declarations(
        types={k: list(v) for k, v in (d.get("types") or {}).items()},
        enums={k: list(v) for k, v in (d.get("enums") or {}).items()},
        records=records,
        additional_symbols=[symbol_from_dict(s) for s in d.get("additional_symbols") or []],
    )


def catalog_to_dict(c: Catalog) -> Dict[str, Any]:
    return {
        "version": c.version,
        "symbols": [symbol_to_dict(s) for s in c.symbols],
        "constants": [constant_to_dict(k) for k in c.constants],
    }


def catalog_to_json(c: Catalog) -> str:
    return json.dumps(catalog_to_dict(c), sort_keys=True, indent=2)


def catalog_to_yaml(c: Catalog) -> str:
    return yaml.safe_dump(catalog_to_dict(c), sort_keys=False)


def _read_packaged_yaml(filename: str) -> Any:
    text = resources.files(DATA_PACKAGE).joinpath(filename).read_text(encoding="utf-8")
    return yaml.safe_load(text)


def load_declarations() -> Declarations:
    """Load the packaged type aliases, enums, records and utility symbols."""
    return declarations_from_dict(_read_packaged_yaml(DECLARATIONS_FILE))


def load_sumo_only_symbols() -> FrozenSet[str]:
    """Load the lower-cased names that only exist in the sumo build."""
    data = _read_packaged_yaml(SUMO_ONLY_FILE) or {}
    return frozenset(name.lower() for name in data.get("sumo_only", []))
