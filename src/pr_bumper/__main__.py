"""Allow ``python -m pr_bumper``."""

from pr_bumper.cli.app import main

main()
