"""Exceptions raised while specializing the template."""


class SetupError(RuntimeError):
    """Base class for every error reported by the setup tool."""


class CatalogMismatch(SetupError, KeyError):
    """Selected homepage is neither a catalog id nor the landing sentinel."""

    def __init__(self, selected: str, choices: list[str]):
        self.selected = selected
        self.choices = choices
        super().__init__(f"Invalid homepage '{selected}'. Choose from: {', '.join(choices)}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class InvalidRefKind(SetupError, TypeError):
    """A path operation for one layout kind was called with the other kind."""


class PathNotFound(SetupError, FileNotFoundError):
    """A path that must exist is missing."""


class PromotionSourceMissing(PathNotFound):
    """The selected homepage's page or layout folder is not on disk."""


class OutputExists(SetupError):
    """The output directory exists and overwriting was not requested."""


class FilesystemIOError(SetupError):
    """Permission or I/O failure; the working tree may be partially transformed."""


class UnsupportedExtension(SetupError, ValueError):
    """Page extension is neither ``tsx`` nor ``jsx``."""
