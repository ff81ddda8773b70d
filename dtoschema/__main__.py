# File: dtoschema/__main__.py
"""
DTOSchema - Module entry point.

Allows running the validator directly via::

    python -m dtoschema --schema schema.yaml --type post post.json

This module simply delegates to the CLI entry point defined in ``dtoschema.cli``.
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from dtoschema.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()
