"""Module entry point for `python -m sample_build_checker`."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
