"""Shared fixtures: small libsodium.js source trees written to tmp_path."""

import json
from pathlib import Path

import pytest


def write_source_tree(root: Path, symbols, constants) -> Path:
    """Lay out wrapper/symbols/*.json and wrapper/constants.json under root."""
    symbols_dir = root / "wrapper" / "symbols"
    symbols_dir.mkdir(parents=True, exist_ok=True)
    for symbol in symbols:
        name = symbol.get("name", "unnamed") if isinstance(symbol, dict) else "raw"
        (symbols_dir / f"{name}.json").write_text(json.dumps(symbol), encoding="utf-8")
    (root / "wrapper" / "constants.json").write_text(json.dumps(constants), encoding="utf-8")
    return root


KEYPAIR_SYMBOL = {
    "name": "crypto_box_seed_keypair",
    "type": "function",
    "inputs": [{"name": "seed", "type": "unsized_buf_optional"}],
    "outputs": [
        {"name": "publicKey", "type": "buf", "size": "libsodium._crypto_box_publickeybytes()"},
        {"name": "privateKey", "type": "buf", "size": "libsodium._crypto_box_secretkeybytes()"},
    ],
    "return": "{publicKey: _format_output(publicKey, outputFormat), "
              "privateKey: _format_output(privateKey, outputFormat), keyType: 'x25519'}",
}

HASH_SYMBOL = {
    "name": "crypto_hash",
    "type": "function",
    "inputs": [{"name": "message", "type": "unsized_buf"}],
    "outputs": [{"name": "hash", "type": "buf"}],
    "return": "_format_output(hash, outputFormat)",
}

VERIFY_SYMBOL = {
    "name": "crypto_auth_verify",
    "type": "function",
    "inputs": [
        {"name": "tag", "type": "buf"},
        {"name": "message", "type": "unsized_buf"},
        {"name": "key", "type": "buf"},
    ],
    "return": "libsodium._crypto_auth_verify(tag_address, message_address, message_length, 0, key_address) === 0",
}

SUMO_SYMBOL = {
    "name": "crypto_hash_sha256",
    "type": "function",
    "inputs": [{"name": "message", "type": "unsized_buf"}],
    "return": "_format_output(hash, outputFormat)",
    "target": "sumo",
}


@pytest.fixture
def source_tree(tmp_path):
    """A small catalog covering paired, plain, boolean and sumo-only symbols."""
    return write_source_tree(
        tmp_path / "libsodium.js",
        symbols=[KEYPAIR_SYMBOL, HASH_SYMBOL, VERIFY_SYMBOL, SUMO_SYMBOL],
        constants=[
            {"name": "crypto_box_SEEDBYTES", "type": "uint"},
            {"name": "SODIUM_VERSION_STRING", "type": "string"},
            {"name": "crypto_hash_sha256_BYTES", "type": "uint"},
        ],
    )
