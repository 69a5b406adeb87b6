"""Module entrypoint for `python -m csv2json`."""

from csv2json.cli import main


if __name__ == "__main__":  # pragma: no cover - exercised via CLI tests
    main()
