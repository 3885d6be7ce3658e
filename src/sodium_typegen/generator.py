"""
TypeGenerator: the public entry point.

Ties the pipeline together for one output target:

    open_session -> load_catalog -> analyze_catalog -> save_dts_file

Every call to generate() opens its own session, so generating the
standard and the sumo document from one generator is independent.
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Optional, Union

from sodium_typegen.acquisition import (
    CatalogSource,
    GithubArchiveSource,
    check_minimum_version,
    open_session,
)
from sodium_typegen.analyzer import analyze_catalog
from sodium_typegen.backends import EmitterOptions, save_dts_file
from sodium_typegen.config import GeneratorConfig
from sodium_typegen.errors import OutputError
from sodium_typegen.loader import load_catalog
from sodium_typegen.serialization import load_declarations, load_sumo_only_symbols
from sodium_typegen.variants import Variant


logger = logging.getLogger(__name__)


class TypeGenerator:
    """
    Generates libsodium-wrappers[-sumo].d.ts from a libsodium.js catalog.

    Args:
        output_file_or_dir: Where to write the declaration file. An existing
            directory receives `libsodium-wrappers[-sumo].d.ts`.
        local_source: libsodium.js source tree. When omitted, the tagged
            archive of the active version is downloaded for each run.
        config: Generator settings (defaults to GeneratorConfig())
        source: Archive fetcher used when no local source is given
    """

    def __init__(
        self,
        output_file_or_dir: Union[str, Path],
        local_source: Optional[Union[str, Path]] = None,
        config: Optional[GeneratorConfig] = None,
        source: Optional[CatalogSource] = None,
    ) -> None:
        self.config = config or GeneratorConfig()
        self.output_file_or_dir = Path(output_file_or_dir).resolve()
        self.local_source = Path(local_source) if local_source is not None else None
        self.source = source or GithubArchiveSource(
            self.config.archive_url_template,
            timeout=self.config.download_timeout,
        )
        self._version = check_minimum_version(self.config.default_version, self.config.minimum_version)
        self.declarations = load_declarations()
        self.sumo_only = load_sumo_only_symbols()

    @property
    def version(self) -> str:
        return self._version

    def get_version(self) -> str:
        return self._version

    def set_download_version(self, version: str) -> TypeGenerator:
        """
        Select the catalog version to download.

        Raises:
            VersionError: If the version is non-numeric or below the minimum
        """
        self._version = check_minimum_version(version, self.config.minimum_version)
        return self

    def resolve_output_path(self, variant: Variant) -> Path:
        """
        Output file for a variant.

        Raises:
            OutputError: If the target exists but cannot be inspected
        """
        target = self.output_file_or_dir
        try:
            is_dir = stat.S_ISDIR(os.stat(target).st_mode)
        except FileNotFoundError:
            is_dir = False
        except OSError as e:
            raise OutputError(f"Could not stat {target}: {e}") from e
        if is_dir:
            return target / variant.file_name(self.config.module_base)
        return target

    def _emitter_options(self) -> EmitterOptions:
        return EmitterOptions(
            module_base=self.config.module_base,
            project_url=self.config.project_url,
            definitions_by=self.config.definitions_by,
        )

    def generate(self, sumo: Union[bool, Variant, None] = False) -> Path:
        """
        Generate one declaration document.

        Args:
            sumo: True / Variant.SUMO for the sumo build

        Returns:
            Path of the written file

        Raises:
            AcquisitionError, CatalogParseError, OutputError
        """
        variant = Variant.from_flag(sumo)
        output_path = self.resolve_output_path(variant)

        with open_session(self.local_source, self._version, self.source) as session:
            catalog = load_catalog(
                session.source_dir,
                self.declarations,
                version=session.version,
                max_workers=self.config.max_workers,
            )

        report = analyze_catalog(catalog, self.declarations, self.sumo_only)
        for warning in report.warnings:
            logger.warning(warning)

        try:
            save_dts_file(
                catalog,
                self.declarations,
                str(output_path),
                variant=variant,
                excluded=self.sumo_only,
                options=self._emitter_options(),
            )
        except OSError as e:
            raise OutputError(f"Could not write {output_path}: {e}") from e

        logger.info("Wrote %s declarations to %s", variant.value, output_path)
        return output_path

    def generate_standard(self) -> Path:
        return self.generate(Variant.STANDARD)

    def generate_sumo(self) -> Path:
        return self.generate(Variant.SUMO)


__all__ = ["TypeGenerator"]
