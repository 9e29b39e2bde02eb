"""Allow ``python -m dmhelper``."""

from dmhelper.cli import main

if __name__ == "__main__":
    main()
