"""Platform implementations for the publishing pipeline.

This package contains self-contained platform modules that provide
publisher implementations for each target (NuGet, Steam Workshop).

Each platform module auto-registers itself with the FormatRegistry
when imported.
"""

# Platform modules are imported dynamically by FormatRegistry.discover_platforms()
# to handle missing dependencies gracefully
