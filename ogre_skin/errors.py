"""Exception types raised while loading mesh and skeleton assets."""


class AssetError(Exception):
    """Base class for failures caused by a malformed or missing asset."""


class ParseError(AssetError, ValueError):
    """Raised when a numeric or structural token cannot be parsed."""


class FormatError(AssetError):
    """Raised when an asset parses but violates a structural invariant."""


class ResourceNotFoundError(AssetError, LookupError):
    """Raised when a referenced material or texture cannot be located."""

    def __init__(self, kind: str, name: str):
        super().__init__(kind, name)
        self.kind = kind
        self.name = name

    def __str__(self) -> str:
        return f"Could not locate {self.kind} resource: {self.name}"


class ModelLoadError(RuntimeError):
    """Raised by the loader when either asset of a model pair fails to load."""

    def __init__(self, mesh_source: str, skeleton_source: str, cause: BaseException):
        super().__init__(mesh_source, skeleton_source, cause)
        self.mesh_source = mesh_source
        self.skeleton_source = skeleton_source
        self.cause = cause

    def __str__(self) -> str:
        return (f"Failed to build model for mesh resource: {self.mesh_source} "
                f"and skeleton resource: {self.skeleton_source} ({self.cause})")
