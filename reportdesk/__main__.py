"""Run the report desk bot: ``python -m reportdesk``."""

from __future__ import annotations

import asyncio

from reportdesk.app import run
from reportdesk.settings import get_settings


def main() -> None:
    asyncio.run(run(get_settings()))


if __name__ == "__main__":
    main()
