"""First-party extensions booted before plugins."""

from .boot import ExtensionBootError, boot_extensions, select_bootable

__all__ = ["ExtensionBootError", "boot_extensions", "select_bootable"]
