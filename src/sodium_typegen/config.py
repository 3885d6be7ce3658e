"""
Generator configuration.

Defaults describe the upstream libsodium.js project. A YAML file with the
same keys can override any of them.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from sodium_typegen.acquisition import check_minimum_version


MINIMUM_VERSION = "0.7.3"


@dataclass(frozen=True)
class GeneratorConfig:
    """
    Settings for TypeGenerator.

    Properties:
        default_version: Catalog version used until set_download_version is called
        minimum_version: Oldest catalog version accepted (never below MINIMUM_VERSION)
        archive_url_template: Remote archive URL, formatted with `version`
        module_base: Module name of the standard build
        project_url: Project line of the document header
        definitions_by: Attribution line of the document header
        max_workers: Thread pool size for descriptor reads (None = executor default)
        download_timeout: Seconds for the archive request (None = no timeout)
    """

    default_version: str = MINIMUM_VERSION
    minimum_version: str = MINIMUM_VERSION
    archive_url_template: str = "https://github.com/jedisct1/libsodium.js/archive/{version}.zip"
    module_base: str = "libsodium-wrappers"
    project_url: str = "https://github.com/jedisct1/libsodium.js"
    definitions_by: str = "Florian Keller <https://github.com/ffflorian>"
    max_workers: Optional[int] = None
    download_timeout: Optional[float] = None

    def __post_init__(self) -> None:
        # the floor may be raised, never lowered
        check_minimum_version(self.minimum_version, MINIMUM_VERSION)
        check_minimum_version(self.default_version, self.minimum_version)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> GeneratorConfig:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
        values = dict(data)
        # YAML reads "1.0" as a float
        for key in ("default_version", "minimum_version"):
            if key in values:
                values[key] = str(values[key])
        return cls(**values)


def load_config(path: str | Path) -> GeneratorConfig:
    """
    Read a YAML configuration file.

    An empty file yields the defaults.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the document is not a mapping or has unknown keys
        VersionError: If a version is non-numeric or below the supported floor
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return GeneratorConfig()
    if not isinstance(data, dict):
        raise ValueError(f"Configuration in {path} must be a mapping")
    return GeneratorConfig.from_mapping(data)


__all__ = ["GeneratorConfig", "MINIMUM_VERSION", "load_config"]
