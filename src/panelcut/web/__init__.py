"""FastAPI REST API for cutting optimization.

This module provides a REST API for computing cutting plans and
plain-text reports.

Usage:
    uvicorn panelcut.web:app --reload
"""

from panelcut.web.app import app, create_app

__all__ = ["app", "create_app"]
