"""Allow ``python -m fontquery``."""

from fontquery.cli import main


if __name__ == "__main__":
    main()
