"""Allow ``python -m vidtube serve``."""

from vidtube.cli import main

main()
