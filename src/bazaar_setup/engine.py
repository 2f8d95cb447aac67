"""Specialize the multi-homepage template into a single-homepage project.

A run is strictly sequential: validate the selection, work out the file
extension, pick the working tree, then prune, promote and clear the old root
page. Each phase finishes before the next one starts; a failure stops the run
and leaves the tree as it was at that point.
"""

import shutil
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .catalog import LANDING, Catalog, RouteGroup, validate_selection
from .errors import (
    FilesystemIOError,
    OutputExists,
    PromotionSourceMissing,
    SetupError,
    UnsupportedExtension,
)
from .merge import merge_directories
from .paths import (
    FILE_EXTENSIONS,
    content_path,
    detect_file_extension,
    layout_container_path,
    nested_page_path,
    root_page_path,
    variant_folder_path,
)
from .ui import StepTracker

DEFAULT_OUTPUT_DIRNAME = "bazaar-starter"
COPY_EXCLUDES = {"node_modules", ".next", ".git"}

# Keys reported to a StepTracker, in run order
RUN_STEPS = [
    ("validate", "Validate selection"),
    ("detect-ext", "Detect page extension"),
    ("copy", "Copy template"),
    ("prune-sections", "Remove unused homepage sections"),
    ("prune-layouts", "Remove unused homepage routes"),
    ("promote", "Set root page"),
    ("root-page", "Remove default root page"),
    ("merge", "Merge into output directory"),
    ("final", "Finalize"),
]


class OutputMode(str, Enum):
    COPY = "copy"
    IN_PLACE = "in-place"


@dataclass
class CustomizationResult:
    """Outcome of a run. Paths other than ``root`` are relative to ``root``."""

    root: Path
    selected: str
    ext: str
    removed: list[Path] = field(default_factory=list)
    promoted: Path | None = None
    root_page_removed: bool = False
    merged: list[Path] = field(default_factory=list)


def remove_path(path: Path) -> bool:
    """Delete a file or directory tree. Returns False if nothing was there."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
        return True
    if path.exists() or path.is_symlink():
        path.unlink()
        return True
    return False


def _check_ext(ext: str) -> None:
    if ext not in FILE_EXTENSIONS:
        raise UnsupportedExtension(f"Unsupported page extension '{ext}'. Expected one of: {', '.join(FILE_EXTENSIONS)}")


# ---------------------------------------------------------------------------
# Pruning
# ---------------------------------------------------------------------------

def prune_sections(root: Path, catalog: Catalog, selected: str) -> list[Path]:
    """Remove the section folders of every homepage except ``selected``."""
    removed = []
    for homepage_id in catalog.choices():
        if homepage_id == selected:
            continue
        path = content_path(root, homepage_id)
        if remove_path(path):
            removed.append(path)
    return removed


def prune_layouts(root: Path, catalog: Catalog, selected: str) -> list[Path]:
    """Remove the routes of every homepage except ``selected``.

    A route group is shared, so only the homepage's own subfolder goes; a
    named folder has a single owner and is removed whole.
    """
    removed = []
    for homepage_id, entry in catalog.items():
        if homepage_id == selected:
            continue
        if isinstance(entry.layout, RouteGroup):
            path = variant_folder_path(root, entry.layout, homepage_id)
        else:
            path = layout_container_path(root, entry.layout)
        if remove_path(path):
            removed.append(path)
    return removed


def prune(root: Path, catalog: Catalog, selected: str, *, keep_sections: bool = False) -> list[Path]:
    """Delete every artifact of the homepages that were not selected.

    Safe to run again with the same selection. ``keep_sections`` leaves the
    section folders alone and only prunes routes.
    """
    validate_selection(catalog, selected)
    removed = [] if keep_sections else prune_sections(root, catalog, selected)
    removed.extend(prune_layouts(root, catalog, selected))
    return removed


# ---------------------------------------------------------------------------
# Promotion
# ---------------------------------------------------------------------------

def promote(root: Path, catalog: Catalog, selected: str, ext: str) -> Path | None:
    """Make the selected homepage's page serve ``/``.

    Returns the page that now serves the root, or None for the landing page.
    Must run once per tree, after ``prune``; a second call fails because the
    source has already moved.
    """
    _check_ext(ext)
    validate_selection(catalog, selected)
    if selected == LANDING:
        return None

    layout = catalog[selected].layout
    if isinstance(layout, RouteGroup):
        source = nested_page_path(root, layout, selected, ext)
        if not source.is_file():
            raise PromotionSourceMissing(f"Page for '{selected}' not found: {source}")
        target = layout_container_path(root, layout) / source.name
        if target.exists():
            raise FileExistsError(f"Cannot promote '{selected}', {target} already exists")
        shutil.move(str(source), str(target))
        shutil.rmtree(source.parent)
        return target
    else:
        source = layout_container_path(root, layout)
        if not source.is_dir():
            raise PromotionSourceMissing(f"Layout folder for '{selected}' not found: {source}")
        target = layout_container_path(root, layout.bracketed())
        if target.exists():
            raise FileExistsError(f"Cannot promote '{selected}', {target} already exists")
        source.rename(target)
        return target / f"page.{ext}"


def clear_root_page(root: Path, ext: str) -> bool:
    """Remove the template's default root page so the promoted page takes over."""
    _check_ext(ext)
    return remove_path(root_page_path(root, ext))


# ---------------------------------------------------------------------------
# Working tree
# ---------------------------------------------------------------------------

def copy_template(src: Path, dest: Path, *, exclude: set[Path] | None = None) -> Path:
    """Copy the template to ``dest``, skipping build output and VCS folders.

    ``exclude`` lists extra absolute paths to leave out; ``dest`` itself is
    always left out since the default output folder sits inside the template.
    """
    src = src.resolve()
    dest = dest.resolve()
    skipped = {dest, *(p.resolve() for p in exclude or ())}

    def _ignore(directory: str, names: list[str]) -> set[str]:
        here = Path(directory).resolve()
        return {name for name in names if name in COPY_EXCLUDES or here / name in skipped}

    shutil.copytree(src, dest, ignore=_ignore, symlinks=True, dirs_exist_ok=True)
    return dest


def specialize(root: Path, catalog: Catalog, selected: str, ext: str, *, keep_sections: bool = False,
               tracker: StepTracker | None = None) -> CustomizationResult:
    """Prune, promote and clear the root page of ``root``, in that order."""
    result = CustomizationResult(root=root, selected=selected, ext=ext)

    if tracker:
        tracker.start("prune-sections")
    if keep_sections:
        if tracker:
            tracker.skip("prune-sections", "--keep-sections")
    else:
        removed = prune_sections(root, catalog, selected)
        result.removed.extend(p.relative_to(root) for p in removed)
        if tracker:
            tracker.complete("prune-sections", f"{len(removed)} removed")

    if tracker:
        tracker.start("prune-layouts")
    removed = prune_layouts(root, catalog, selected)
    result.removed.extend(p.relative_to(root) for p in removed)
    if tracker:
        tracker.complete("prune-layouts", f"{len(removed)} removed")

    if tracker:
        tracker.start("promote")
    promoted = promote(root, catalog, selected, ext)
    result.promoted = promoted.relative_to(root) if promoted else None
    if tracker:
        if result.promoted is None:
            tracker.skip("promote", "landing page needs no restructuring")
        else:
            tracker.complete("promote", result.promoted.as_posix())

    if tracker:
        tracker.start("root-page")
    result.root_page_removed = clear_root_page(root, ext)
    if tracker:
        tracker.complete("root-page", "removed" if result.root_page_removed else "already absent")

    return result


def customize_template(
    template_dir: Path,
    selected: str,
    *,
    catalog: Catalog,
    mode: OutputMode = OutputMode.COPY,
    output_dir: Path | None = None,
    keep_sections: bool = False,
    force: bool = False,
    tracker: StepTracker | None = None,
) -> CustomizationResult:
    """Run the whole specialization for one selected homepage.

    ``OutputMode.COPY`` works on a copy in ``output_dir`` (merged into it when
    it already exists and ``force`` is set); ``OutputMode.IN_PLACE`` mutates
    ``template_dir`` itself. Returns what was changed.
    """
    template_dir = Path(template_dir).resolve()
    if output_dir is None:
        output_dir = template_dir / DEFAULT_OUTPUT_DIRNAME
    output_dir = Path(output_dir).resolve()

    if tracker:
        tracker.start("validate")
    validate_selection(catalog, selected)
    merge_into_existing = mode == OutputMode.COPY and output_dir.exists()
    if merge_into_existing and not force:
        raise OutputExists(f"Output directory already exists: {output_dir}")
    if tracker:
        tracker.complete("validate", selected)

    try:
        if tracker:
            tracker.start("detect-ext")
        ext = detect_file_extension(template_dir)
        if tracker:
            tracker.complete("detect-ext", ext)

        if mode == OutputMode.IN_PLACE:
            if tracker:
                tracker.skip("copy", "in place")
                tracker.skip("merge", "in place")
            return specialize(template_dir, catalog, selected, ext, keep_sections=keep_sections, tracker=tracker)

        if not merge_into_existing:
            if tracker:
                tracker.start("copy")
            copy_template(template_dir, output_dir)
            if tracker:
                tracker.complete("copy", str(output_dir))
                tracker.skip("merge", "new directory")
            return specialize(output_dir, catalog, selected, ext, keep_sections=keep_sections, tracker=tracker)

        # Stage next to the output so the final moves stay on one filesystem
        with tempfile.TemporaryDirectory(prefix=f".{output_dir.name}-", dir=output_dir.parent) as temp_dir:
            staging = Path(temp_dir) / output_dir.name
            if tracker:
                tracker.start("copy")
            copy_template(template_dir, staging, exclude={output_dir, Path(temp_dir)})
            if tracker:
                tracker.complete("copy", "staging directory")
            result = specialize(staging, catalog, selected, ext, keep_sections=keep_sections, tracker=tracker)
            if tracker:
                tracker.start("merge")
            merged = merge_directories(staging, output_dir)
            result.merged = [p.relative_to(output_dir) for p in merged]
            if tracker:
                tracker.complete("merge", f"{len(result.merged)} files into {output_dir}")
        result.root = output_dir
        return result
    except SetupError:
        raise
    except OSError as e:
        raise FilesystemIOError(f"{e}") from e
