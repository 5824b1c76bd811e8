"""Example: one claim-and-process cycle through the service layer (no Flask).

Run `python scripts/init_db.py && python scripts/seed_db.py` first.
"""

import importlib
import logging

from config import get_settings_module

from src.shift_creator.shift_creator.container import build_container


def main():
    logging.basicConfig(level=logging.INFO)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    report = container.processing_service.process_pending()
    for outcome in report.outcomes:
        print(outcome)


if __name__ == "__main__":
    main()
