"""Book Manager: catalogue browsing and a personal book list."""

__version__ = "1.0.0"
