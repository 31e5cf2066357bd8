"""Allow ``python -m askgpt``."""

from askgpt.cli import main

main()
