"""Module entrypoint for `python -m ctg_record_validator.suite`.

Delegates to the suite CLI implementation.
"""

from .run_suite import main


if __name__ == "__main__":
    main()
