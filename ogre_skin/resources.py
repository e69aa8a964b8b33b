"""
Named-resource lookup and the texture cache.

Assets are addressed by package, kind and a name that is matched on its
case-insensitive basename without directories or extension, so ``Skin.material``,
``materials/skin`` and ``SKIN`` all find the same resource.
"""

import io
import os
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, BinaryIO, Callable, Dict, Optional, TextIO, Union

from .errors import ResourceNotFoundError
from .utils.common import strip_filename

logger = logging.getLogger(__name__)

MODEL_KIND = "raw"
MATERIAL_KIND = "raw"
TEXTURE_KIND = "drawable"


class ResourceResolver(ABC):
    """Base class for resolving asset names to readable resources"""

    def __init__(self, package: str):
        """
        Args:
            package: Package (namespace) searched when a lookup names none
        """
        self.package = package

    @abstractmethod
    def get_identifier(self, name: str, kind: str, package: Optional[str] = None) -> Optional[str]:
        """
        Resolve a resource name

        Args:
            name: Resource name, matched on its stripped basename
            kind: Resource kind (e.g. 'raw', 'drawable')
            package: Package to search, defaults to this resolver's package

        Returns:
            Resource identifier or None if not found
        """

    @abstractmethod
    def open_resource(self, identifier: str) -> BinaryIO:
        """Open a resolved resource for binary reading"""

    def require(self, name: str, kind: str, package: Optional[str] = None) -> str:
        """Resolve a resource name, raising ResourceNotFoundError if it is missing"""
        identifier = self.get_identifier(name, kind, package)
        if identifier is None:
            raise ResourceNotFoundError(kind, strip_filename(name))
        return identifier

    def open_text(self, identifier: str, encoding: str = "utf-8", errors: str = "replace") -> TextIO:
        return io.TextIOWrapper(self.open_resource(identifier), encoding=encoding, errors=errors)


class DirectoryResources(ResourceResolver):
    """Resources laid out on disk as ``<root>/<package>/<kind>/<file>``"""

    def __init__(self, root_dir: Union[str, Path], package: str = "app"):
        super().__init__(package)
        self.root_dir = Path(root_dir)
        self._file_cache: Dict[tuple, Dict[str, str]] = {}
        self._lock = threading.Lock()

    def _get_file_cache(self, package: str, kind: str) -> Dict[str, str]:
        """
        Scan one package/kind directory and cache file paths by stripped name

        Returns:
            Dictionary mapping stripped name to full path
        """
        key = (package, kind)
        with self._lock:
            if key in self._file_cache:
                return self._file_cache[key]

            file_cache: Dict[str, str] = {}
            target_dir = self.root_dir / package / kind
            if target_dir.is_dir():
                for root, dirs, files in os.walk(target_dir):
                    dirs.sort()
                    for file in sorted(files):
                        stripped = strip_filename(file)
                        if stripped in file_cache:
                            logger.warning("Ignoring %s, '%s' already resolves to %s",
                                           os.path.join(root, file), stripped, file_cache[stripped])
                            continue
                        file_cache[stripped] = os.path.join(root, file)
            else:
                logger.warning("Resource directory not found: %s", target_dir)

            self._file_cache[key] = file_cache
            return file_cache

    def get_identifier(self, name: str, kind: str, package: Optional[str] = None) -> Optional[str]:
        return self._get_file_cache(package or self.package, kind).get(strip_filename(name))

    def open_resource(self, identifier: str) -> BinaryIO:
        return open(identifier, "rb")

    def __repr__(self) -> str:
        return f"DirectoryResources(root_dir='{self.root_dir}', package='{self.package}')"


class TextureCache:
    """Cache of texture handles keyed by texture resource identifier"""

    def __init__(self, factory: Optional[Callable[[str], Any]] = None):
        """
        Args:
            factory: Creates a texture handle from an identifier. Defaults to using
                the identifier itself as the handle.
        """
        self._factory = factory if factory is not None else (lambda identifier: identifier)
        self._textures: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, identifier: str) -> Any:
        """Return the handle for identifier, creating it on first use"""
        with self._lock:
            if identifier not in self._textures:
                self._textures[identifier] = self._factory(identifier)
            return self._textures[identifier]

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._textures

    def __len__(self) -> int:
        return len(self._textures)
