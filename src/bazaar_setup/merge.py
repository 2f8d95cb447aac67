"""Merge a freshly generated tree into an existing directory."""

import shutil
from pathlib import Path


def merge_directories(src: Path, dest: Path) -> list[Path]:
    """Move everything under ``src`` into ``dest`` and delete ``src``.

    Files in ``dest`` that collide with a file from ``src`` are replaced.
    Nothing is rolled back on failure: ``dest`` may be left partially merged
    and ``src`` partially emptied. Returns the destination of every moved file.
    """
    moved: list[Path] = []
    dest.mkdir(parents=True, exist_ok=True)
    for item in sorted(src.iterdir()):
        dest_path = dest / item.name
        if item.is_dir() and not item.is_symlink():
            moved.extend(merge_directories(item, dest_path))
        else:
            if dest_path.is_symlink():
                # replace the link itself, never write through it
                dest_path.unlink()
            elif dest_path.is_dir():
                shutil.rmtree(dest_path)
            shutil.move(str(item), str(dest_path))
            moved.append(dest_path)
    shutil.rmtree(src)
    return moved
