"""Resolve important filesystem paths relative to the backend root."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathResolver:
    """
    Folder resolver that returns paths relative to the package and backend roots.
    Works from any file and any working directory.
    """

    # utility -> studio -> backend
    PACKAGE_ROOT = Path(__file__).resolve().parents[1]
    BACKEND_ROOT = Path(__file__).resolve().parents[2]

    DIR_MAP = {
        "logs": BACKEND_ROOT / "data" / "logs",
        "config": PACKAGE_ROOT / "config",
        "root": BACKEND_ROOT,
    }

    @classmethod
    def get(cls, name: str) -> Path:
        """
        Returns absolute path from name key.
        Ensures directory exists if it's a folder.
        """
        if name not in cls.DIR_MAP:
            msg = f"Unknown directory key: '{name}'. Valid keys: {list(cls.DIR_MAP.keys())}"
            logger.error(msg)
            raise KeyError(msg)

        path = cls.DIR_MAP[name]

        if path.suffix == "":
            path.mkdir(parents=True, exist_ok=True)

        return path


class Finder:
    """Thin wrapper exposing resolved directories for external callers.

    Delegates actual lookups to PathResolver while keeping a simple interface.
    """

    def get_directory(self, name: str) -> Path:
        """Return a resolved, ensured directory path by logical name."""
        return PathResolver.get(name)
