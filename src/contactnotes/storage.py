"""Data directory layout."""

from __future__ import annotations

import os


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def ensure_structure(data_dir: str) -> dict:
    root = data_dir or os.getcwd()
    ensure_dir(root)
    paths = {
        "root": root,
        "records": os.path.join(root, "records.json"),
        "flags": os.path.join(root, "migration_state.yml"),
        "exports": os.path.join(root, "Exports"),
        "logs": os.path.join(root, "Logs"),
    }
    ensure_dir(paths["exports"])
    ensure_dir(paths["logs"])
    return paths
