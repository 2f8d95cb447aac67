"""Filesystem locations of homepage artifacts inside a template tree.

Nothing here touches the disk except ``detect_file_extension``.
"""

from pathlib import Path

from .catalog import LayoutRef, RouteGroup
from .errors import InvalidRefKind

FILE_EXTENSIONS = ("tsx", "jsx")


def app_dir(root: Path) -> Path:
    return root / "src" / "app"


def content_path(root: Path, homepage_id: str) -> Path:
    """Folder holding a homepage's section components."""
    return root / "src" / "pages-sections" / homepage_id


def layout_container_path(root: Path, ref: LayoutRef) -> Path:
    return app_dir(root) / ref.folder_name


def variant_folder_path(root: Path, ref: LayoutRef, homepage_id: str) -> Path:
    """Per-homepage subfolder inside a shared route group."""
    if not isinstance(ref, RouteGroup):
        raise InvalidRefKind(
            f"'{homepage_id}' uses folder '{ref.folder_name}', which is not a route group"
        )
    return layout_container_path(root, ref) / homepage_id


def nested_page_path(root: Path, ref: LayoutRef, homepage_id: str, ext: str) -> Path:
    return variant_folder_path(root, ref, homepage_id) / f"page.{ext}"


def root_page_path(root: Path, ext: str) -> Path:
    return app_dir(root) / f"page.{ext}"


def root_layout_path(root: Path) -> Path:
    return app_dir(root) / "layout.tsx"


def detect_file_extension(root: Path) -> str:
    """Return ``"tsx"`` for a TypeScript template, ``"jsx"`` otherwise."""
    return "tsx" if root_layout_path(root).exists() else "jsx"
