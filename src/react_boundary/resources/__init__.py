"""Packaged resource helpers for :mod:`react_boundary`."""

from __future__ import annotations

from importlib import resources
from importlib.resources.abc import Traversable


def get_resource(relative_path: str) -> Traversable:
    """Return a traversable handle to a packaged resource.

    Raises:
        FileNotFoundError: If the resource is not shipped with the package.

    Example:
        >>> get_resource("react_boundary.defaults.toml").name
        'react_boundary.defaults.toml'
    """

    candidate = resources.files(__package__).joinpath(relative_path)
    if not candidate.exists():
        raise FileNotFoundError(relative_path)
    return candidate


__all__ = ["get_resource"]
