"""PTB - Flask host bootstrap with folder-scanned service provider plugins."""

__version__ = "1.0.0"
