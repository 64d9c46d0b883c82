"""Allow ``python -m cfgstore``."""

from .cli import main

main()
