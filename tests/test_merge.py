"""Unit tests for merging a generated tree into an existing directory."""

from __future__ import annotations

from pathlib import Path

import pytest

from bazaar_setup.merge import merge_directories

from .helpers import snapshot


def _write(root: Path, files: dict[str, str]) -> None:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)


@pytest.fixture
def trees(tmp_path: Path) -> tuple[Path, Path]:
    src = tmp_path / "generated"
    dest = tmp_path / "existing"
    _write(src, {
        "package.json": "new package",
        "src/app/(layout-1)/page.tsx": "new page",
        "src/components/header.tsx": "header",
        "public/logo.svg": "<svg/>",
    })
    _write(dest, {
        "package.json": "old package",
        "README.md": "readme",
        "src/app/(layout-1)/layout.tsx": "layout",
        "src/app/(layout-1)/page.tsx": "old page",
    })
    return src, dest


class TestMergeDirectories:
    @pytest.mark.unit
    def test_result_is_union(self, trees):
        src, dest = trees
        expected = set(snapshot(src)) | set(snapshot(dest))
        merge_directories(src, dest)
        assert set(snapshot(dest)) == expected

    @pytest.mark.unit
    def test_source_wins_on_collision(self, trees):
        src, dest = trees
        merge_directories(src, dest)
        files = snapshot(dest)
        assert files["package.json"] == b"new package"
        assert files["src/app/(layout-1)/page.tsx"] == b"new page"
        assert files["src/app/(layout-1)/layout.tsx"] == b"layout"
        assert files["README.md"] == b"readme"

    @pytest.mark.unit
    def test_source_removed(self, trees):
        src, dest = trees
        merge_directories(src, dest)
        assert not src.exists()

    @pytest.mark.unit
    def test_returns_moved_files(self, trees):
        src, dest = trees
        moved = merge_directories(src, dest)
        assert sorted(p.relative_to(dest).as_posix() for p in moved) == [
            "package.json",
            "public/logo.svg",
            "src/app/(layout-1)/page.tsx",
            "src/components/header.tsx",
        ]

    @pytest.mark.unit
    def test_empty_directories_are_created(self, tmp_path):
        src = tmp_path / "src"
        (src / "empty" / "nested").mkdir(parents=True)
        dest = tmp_path / "dest"
        dest.mkdir()
        assert merge_directories(src, dest) == []
        assert (dest / "empty" / "nested").is_dir()
        assert not src.exists()

    @pytest.mark.unit
    def test_into_missing_destination(self, tmp_path):
        src = tmp_path / "src"
        _write(src, {"a/b.txt": "b"})
        dest = tmp_path / "dest"
        merge_directories(src, dest)
        assert (dest / "a" / "b.txt").read_text() == "b"

    @pytest.mark.unit
    def test_file_replacing_directory(self, tmp_path):
        src = tmp_path / "src"
        _write(src, {"config": "file now"})
        dest = tmp_path / "dest"
        _write(dest, {"config/old.txt": "old"})
        merge_directories(src, dest)
        assert (dest / "config").read_text() == "file now"

    @pytest.mark.unit
    def test_file_replaces_symlink_to_directory(self, tmp_path):
        outside = tmp_path / "outside"
        _write(outside, {"existing.txt": "x"})
        src = tmp_path / "src"
        _write(src, {"cfg": "from src"})
        dest = tmp_path / "dest"
        dest.mkdir()
        (dest / "cfg").symlink_to(outside, target_is_directory=True)
        merge_directories(src, dest)
        assert not (dest / "cfg").is_symlink()
        assert (dest / "cfg").read_text() == "from src"
        assert sorted(p.name for p in outside.iterdir()) == ["existing.txt"]

    @pytest.mark.unit
    def test_file_replaces_symlink_to_file(self, tmp_path):
        outside = tmp_path / "outside.txt"
        outside.write_text("untouched")
        src = tmp_path / "src"
        _write(src, {"a.txt": "from src"})
        dest = tmp_path / "dest"
        dest.mkdir()
        (dest / "a.txt").symlink_to(outside)
        merge_directories(src, dest)
        assert not (dest / "a.txt").is_symlink()
        assert (dest / "a.txt").read_text() == "from src"
        assert outside.read_text() == "untouched"

    @pytest.mark.unit
    def test_directory_over_file_fails_midway(self, tmp_path):
        src = tmp_path / "src"
        _write(src, {"a.txt": "a", "b/c.txt": "c"})
        dest = tmp_path / "dest"
        _write(dest, {"b": "a file"})
        with pytest.raises(FileExistsError):
            merge_directories(src, dest)
        # Not rolled back: the file merged before the failure stays merged
        assert (dest / "a.txt").read_text() == "a"
        assert not (src / "a.txt").exists()
        assert (src / "b" / "c.txt").exists()
