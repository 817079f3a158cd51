"""Git-flow automation for Maven projects."""

__version__ = "0.1.0"
