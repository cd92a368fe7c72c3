"""stepatom — Atom test steps for browser automation."""

__version__ = "0.1.0"
