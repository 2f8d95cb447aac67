"""Homepage catalog: which layout group owns each homepage variant.

The raw table uses the Next.js folder convention for layout groups, a
bracketed name such as ``(layout-1)`` for a shared route group and a plain
name such as ``furniture-3`` for a folder owned by a single homepage. The
convention is parsed once, in ``build_catalog``, into ``RouteGroup`` and
``NamedFolder`` so nothing downstream has to pattern-match folder names.
"""

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .errors import CatalogMismatch

# Pseudo homepage backed by the template's default page; it has no layout group.
LANDING = "landing"

HOMEPAGES = {
    "fashion-1": "(layout-1)",
    "fashion-2": "(layout-1)",
    "fashion-3": "(layout-3)",
    "furniture-1": "(layout-1)",
    "furniture-2": "(layout-3)",
    "furniture-3": "furniture-3",
    "gift-shop": "(layout-3)",
    "gadget-1": "(layout-1)",
    "gadget-2": "(layout-3)",
    "gadget-3": "gadget-3",
    "grocery-1": "(layout-3)",
    "grocery-2": "(layout-2)",
    "grocery-3": "(layout-1)",
    "grocery-4": "grocery-4",
    "health-beauty": "(layout-2)",
    "market-1": "(layout-1)",
    "market-2": "(layout-1)",
    "medical": "(layout-3)",
}

_ROUTE_GROUP_RE = re.compile(r"^\((?P<name>[^()/]+)\)$")
_NAMED_FOLDER_RE = re.compile(r"^[^()/]+$")


@dataclass(frozen=True)
class RouteGroup:
    """Shared layout folder; each homepage lives in its own subfolder."""

    name: str

    @property
    def folder_name(self) -> str:
        return f"({self.name})"

    def bracketed(self) -> "RouteGroup":
        return self


@dataclass(frozen=True)
class NamedFolder:
    """Layout folder owned by exactly one homepage, holding its page directly."""

    name: str

    @property
    def folder_name(self) -> str:
        return self.name

    def bracketed(self) -> RouteGroup:
        """Route group form of this folder, used when it becomes the root."""
        return RouteGroup(self.name)


LayoutRef = RouteGroup | NamedFolder


@dataclass(frozen=True)
class CatalogEntry:
    id: str
    layout: LayoutRef


def parse_layout(text: str) -> LayoutRef:
    """Parse a layout folder name into its tagged reference."""
    text = text.strip()
    match = _ROUTE_GROUP_RE.match(text)
    if match:
        return RouteGroup(match.group("name"))
    if _NAMED_FOLDER_RE.match(text):
        return NamedFolder(text)
    raise ValueError(f"Invalid layout folder name: {text!r}")


class Catalog(Mapping[str, CatalogEntry]):
    """Immutable id -> entry mapping; build it with ``build_catalog``."""

    def __init__(self, entries: Mapping[str, CatalogEntry]):
        self._entries = MappingProxyType(dict(entries))

    def __getitem__(self, key: str) -> CatalogEntry:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Catalog({list(self._entries)!r})"

    def choices(self) -> list[str]:
        """Every valid selection, catalog ids first then the landing page."""
        return [*self._entries, LANDING]

    def ids_sharing(self, ref: LayoutRef) -> list[str]:
        return [entry.id for entry in self._entries.values() if entry.layout == ref]


def build_catalog(raw: Mapping[str, str]) -> Catalog:
    """Build a catalog from an ``id -> layout folder name`` table.

    Raises ValueError when an id collides with the landing sentinel or when a
    named folder is claimed by more than one homepage.
    """
    entries: dict[str, CatalogEntry] = {}
    owners: dict[str, str] = {}
    for homepage_id, layout_text in raw.items():
        if homepage_id == LANDING:
            raise ValueError(f"'{LANDING}' is reserved and cannot be a catalog id")
        if not homepage_id or "/" in homepage_id:
            raise ValueError(f"Invalid homepage id: {homepage_id!r}")
        layout = parse_layout(layout_text)
        if isinstance(layout, NamedFolder):
            if layout.name in owners:
                raise ValueError(
                    f"Folder '{layout.name}' is claimed by both "
                    f"'{owners[layout.name]}' and '{homepage_id}'"
                )
            owners[layout.name] = homepage_id
        entries[homepage_id] = CatalogEntry(homepage_id, layout)
    return Catalog(entries)


def validate_selection(catalog: Catalog, selected: str) -> None:
    """Reject a selection that is neither a catalog id nor the landing page."""
    if selected != LANDING and selected not in catalog:
        raise CatalogMismatch(selected, catalog.choices())


CATALOG = build_catalog(HOMEPAGES)
