"""entityschema - Compile declarative entity metadata into rules, relations and table DDL."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("entityschema")
except PackageNotFoundError:
    __version__ = "unknown"

__all__ = ["__version__"]
