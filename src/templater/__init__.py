"""templater: generate ready-to-build projects from packaged template archives."""

__version__ = "1.0.0"

__all__ = ["__version__"]
