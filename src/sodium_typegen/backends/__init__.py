"""Backends for declaration output generation."""

from .dts_generator import EmitterOptions, generate_dts, render_function, save_dts_file

__all__ = ["EmitterOptions", "generate_dts", "render_function", "save_dts_file"]
