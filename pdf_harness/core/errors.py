"""
Generation Errors
=================

Exception taxonomy shared by the session manager, template resolver,
adapters and HTTP facade.
"""

from typing import Iterable, List


class PDFGenerationError(Exception):
    """Base exception for every failure raised while producing a PDF."""

    pass


class EngineStartFailure(PDFGenerationError):
    """The browser engine process could not be launched."""

    pass


class ContextCreationFailure(PDFGenerationError):
    """A rendering context was requested from a session that is not live."""

    pass


class RendererBusy(PDFGenerationError):
    """Every rendering context slot stayed busy for the whole acquire timeout."""

    pass


class LoadTimeout(PDFGenerationError):
    """The document did not reach network quiescence within the load bound."""

    pass


class AssetNotFound(PDFGenerationError):
    """A template asset referenced by name is missing from the asset directory."""

    def __init__(self, name: str, path: str):
        super().__init__(f"Asset {name} not found at {path}")
        self.name = name
        self.path = path


class UnknownAdapter(PDFGenerationError):
    """The caller asked for a library name that is not registered."""

    def __init__(self, name: str, available: Iterable[str]):
        super().__init__(f"Unknown library: {name}")
        self.name = name
        self.available: List[str] = list(available)
