"""Core package for the Evaporative Cooling feature-selection framework."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("fs-ec")
except PackageNotFoundError:  # pragma: no cover - fallback for local usage before install
    __version__ = "0.0.0"

__all__ = ["__version__"]
