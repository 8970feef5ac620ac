"""CLI command implementations for the slabs application.

- validate: Validate an optimization job file
"""

from slabs.cli.commands.validate import display_load_error, validate_command

__all__ = ["display_load_error", "validate_command"]
