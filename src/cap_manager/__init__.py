"""cap-manager: a file-based requirements and progress tracker."""

__version__ = "0.1.0"
