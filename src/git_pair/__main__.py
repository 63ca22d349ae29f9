"""Allow running git-pair with ``python -m git_pair``."""

from .cli import main

main()
