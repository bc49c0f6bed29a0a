"""Loading of optimization requests from JSON files and dictionaries.

Every failure surfaces as a ``ConfigError``. Schema violations carry one
detail per offending field, keyed by its JSON path (``stock[0].width``),
and are classified by where they occur: ``invalid_piece`` when every
violation lies inside the ``pieces`` list, ``invalid_request`` otherwise.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from panelcut.application.config.schema import OptimizationRequestSchema
from panelcut.domain.exceptions import PanelCutError

SCHEMA_ERROR_TYPES = ("invalid_piece", "invalid_request")


class ConfigError(PanelCutError):
    """A request that could not be read, parsed or validated.

    Attributes:
        error_type: ``file_not_found``, ``file_read_error``, ``json_parse``,
            or one of ``SCHEMA_ERROR_TYPES``.
        path: Request file, None for in-memory requests.
    """

    def __init__(
        self,
        message: str,
        error_type: str,
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.error_type = error_type
        self.path = path


def _json_path(loc: tuple[str | int, ...]) -> str:
    """Render a pydantic error location as ``stock[0].width``."""
    path = ""
    for segment in loc:
        if isinstance(segment, int):
            path += f"[{segment}]"
        elif path:
            path += f".{segment}"
        else:
            path = segment
    return path


def _schema_error(error: ValidationError) -> ConfigError:
    issues = error.errors()
    details = [
        {
            "path": _json_path(issue["loc"]),
            "message": issue["msg"],
            "value": issue.get("input"),
            "error_type": issue["type"],
        }
        for issue in issues
    ]

    pieces_only = all(issue["loc"][:1] == ("pieces",) for issue in issues)
    lines = [f"Request rejected ({len(details)} problem{'s' if len(details) != 1 else ''}):"]
    for detail in details:
        line = f"  - {detail['path'] or '(root)'}: {detail['message']}"
        # Containers are echoed by the path alone
        if isinstance(detail["value"], (str, int, float)):
            line += f" (got: {detail['value']!r})"
        lines.append(line)

    return ConfigError(
        "\n".join(lines),
        error_type="invalid_piece" if pieces_only else "invalid_request",
        details=details,
    )


def load_config_from_dict(data: dict[str, Any]) -> OptimizationRequestSchema:
    """Validate an in-memory optimization request.

    Raises:
        ConfigError: ``invalid_piece`` or ``invalid_request``.
    """
    try:
        return OptimizationRequestSchema.model_validate(data)
    except ValidationError as e:
        raise _schema_error(e) from e


def load_config(path: Path) -> OptimizationRequestSchema:
    """Read a JSON request file and validate it.

    Args:
        path: Request file.

    Returns:
        The validated request.

    Raises:
        ConfigError: ``file_not_found`` or ``file_read_error`` when the file
            cannot be read, ``json_parse`` (with line and column) for broken
            JSON, and the schema error types of ``load_config_from_dict``
            with ``path`` set.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(
            f"Request file not found: {path}", "file_not_found", path=path
        ) from None
    except OSError as e:
        raise ConfigError(
            f"Cannot read request file {path}: {e.strerror or e}",
            "file_read_error",
            path=path,
        ) from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(
            f"{path} is not valid JSON: {e.msg} at line {e.lineno}, column {e.colno}",
            "json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        ) from e

    try:
        return load_config_from_dict(data)
    except ConfigError as e:
        e.path = path
        raise
