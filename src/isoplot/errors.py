from __future__ import annotations


class ConfigurationError(ValueError):
    """Invalid bounds, tolerance or refinement parameters."""
