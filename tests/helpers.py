"""Template tree builders shared by the tests."""

from __future__ import annotations

from pathlib import Path

from bazaar_setup.catalog import Catalog, RouteGroup


def page_source(homepage_id: str) -> str:
    return f"export default function Page() {{ return <{homepage_id} />; }}\n"


def build_template(root: Path, catalog: Catalog, ext: str = "tsx") -> Path:
    """Lay out the folders the setup tool expects for ``catalog``."""
    app = root / "src" / "app"
    sections = root / "src" / "pages-sections"
    app.mkdir(parents=True)

    (app / f"layout.{ext}").write_text("export default function RootLayout() {}\n")
    (app / f"page.{ext}").write_text("export default function Landing() {}\n")
    (root / "package.json").write_text('{"name": "bazaar"}\n')

    for homepage_id in catalog.choices():
        folder = sections / homepage_id
        folder.mkdir(parents=True)
        (folder / f"section-1.{ext}").write_text(f"// {homepage_id} section\n")

    for homepage_id, entry in catalog.items():
        container = app / entry.layout.folder_name
        if isinstance(entry.layout, RouteGroup):
            container.mkdir(exist_ok=True)
            (container / f"layout.{ext}").write_text(f"// {entry.layout.name} layout\n")
            page_dir = container / homepage_id
        else:
            page_dir = container
        page_dir.mkdir(parents=True)
        (page_dir / f"page.{ext}").write_text(page_source(homepage_id))

    # Folders that must never be copied
    (root / "node_modules" / "react").mkdir(parents=True)
    (root / "node_modules" / "react" / "index.js").write_text("module.exports = {}\n")
    (root / ".next" / "cache").mkdir(parents=True)
    (root / ".git").mkdir()
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    return root


def snapshot(root: Path) -> dict[str, bytes]:
    """Map of relative POSIX path -> content for every file under ``root``."""
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }
