"""
Hashline - address lines of a file by ``<line>:<hash>`` references.

Heavy modules (plugin, tools.registry) are NOT re-exported here to avoid
circular imports.  Import them directly::

    from hashline.plugin import HashlinePlugin
    from hashline.tools.registry import ToolRegistry
"""

__version__ = "0.3.0"

# Only re-export lightweight, leaf-node modules that don't trigger cycles.
from hashline.engine.errors import (
    HashlineError,
    InvalidEdit,
    InvalidRange,
    MalformedReference,
    MandatoryReferenceUsage,
    StaleReference,
    Unreadable,
)
from hashline.engine.fingerprint import LineRef, fingerprint

__all__ = [
    "HashlineError",
    "InvalidEdit",
    "InvalidRange",
    "LineRef",
    "MalformedReference",
    "MandatoryReferenceUsage",
    "StaleReference",
    "Unreadable",
    "fingerprint",
    "__version__",
]
