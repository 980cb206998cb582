"""FastAPI backend server for the options position tracker."""

__version__ = "1.0.0"
