"""Build tool operations."""

from .maven import POM_FILE_NAME, BuildError, BuildToolGateway, Maven

__all__ = [
    "BuildError",
    "BuildToolGateway",
    "Maven",
    "POM_FILE_NAME",
]
