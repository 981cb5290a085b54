"""Fan-out service configuration settings.

Compatibility entry point; the settings classes live in
infrastructure.configuration.
"""

from infrastructure.configuration import Settings, settings

__all__ = ["Settings", "settings"]
