"""Allow running as `python -m reminders`."""

from .cli.main import main

main()
