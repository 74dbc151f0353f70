"""Console-script entry point for :mod:`react_boundary`."""

from __future__ import annotations

from react_boundary.cli import create_app


def main() -> None:
    """Execute the CLI application.

    Example:
        >>> from react_boundary.__main__ import main
        >>> main()  # doctest: +SKIP
    """

    app = create_app()
    app(prog_name="react-boundary")


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    main()


__all__ = ["main"]
