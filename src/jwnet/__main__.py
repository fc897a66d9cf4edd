"""Allow running the CLI with ``python -m jwnet``."""

from jwnet.cli.main import main


main()
