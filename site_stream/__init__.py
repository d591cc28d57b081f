# site_stream/__init__.py
"""
SiteStream package initializer.
Defines package version and exposes CLI.
"""
__version__ = "0.1.0"

# Expose CLI entry point; the name differs from the submodule so that
# ``site_stream.cli`` keeps resolving to the module
from site_stream.cli import cli as main_cli

__all__ = ["__version__", "main_cli"]
