"""Find stale, low-activity repositories in a GitHub organization."""

__version__ = "1.0.0"

__all__ = ["__version__"]
