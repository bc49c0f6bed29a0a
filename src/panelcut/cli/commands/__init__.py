"""CLI command implementations for the panelcut application.

This package contains subcommands for the panelcut CLI, including:
- validate: Validate an optimization request file
"""

from panelcut.cli.commands.validate import (
    display_load_error,
    display_panelcut_error,
    validate_command,
)

__all__ = ["display_load_error", "display_panelcut_error", "validate_command"]
