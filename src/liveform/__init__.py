"""
liveform - form hydration and model binding for server-rendered live components.
"""

from __future__ import annotations

from .errors import ComponentError, LiveFormError, UnprocessableInput

__version__ = "0.1.0"

__all__ = ["ComponentError", "LiveFormError", "UnprocessableInput", "__version__"]
