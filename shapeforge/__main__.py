# shapeforge/__main__.py
"""Allow ``python -m shapeforge``."""

from shapeforge.cli.cli import main

if __name__ == "__main__":
    main()
