"""Module entrypoint so ``python -m roadsnap`` invokes the CLI."""

from roadsnap.cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
