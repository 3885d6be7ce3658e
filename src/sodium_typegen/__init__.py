"""
sodium-typegen: TypeScript declarations for libsodium.js

Reads the libsodium.js wrapper catalog (one JSON descriptor per exported
function plus a constants file) and compiles it into a `.d.ts` declaration
document for either the standard or the sumo build.

LAYERS:
-------
    - model / return_shapes: catalog structure only
    - loader / serialization: catalog files -> model
    - type_mapping / resolver / variants: the compiler rules
    - backends: model -> declaration text
    - acquisition / generator: sources, sessions and output files
"""

__version__ = "0.1.0"
