from __future__ import annotations

import logging
import sys
from dataclasses import asdict
from pathlib import Path

from .app import SchoolDesk
from .constants import APP_NAME
from .export import export_workbook
from .logger import ErrorLogger, configure_logging
from .reports import dashboard_stats


def main(argv: list[str]) -> int:
    """Start the store, seed it if needed and print the dashboard figures.

    ``python -m schooldesk [export.xlsx]`` also writes every collection to a
    workbook when a path is given.
    """

    configure_logging()
    try:
        app = SchoolDesk()
    except Exception as e:
        logging.error(f"Failed to start {APP_NAME}: {e}")
        ErrorLogger().log_exception(e, "startup")
        print(f"Failed to start {APP_NAME}: {e}", file=sys.stderr)
        return 1

    print(APP_NAME)
    for name, value in asdict(dashboard_stats(app.services)).items():
        print(f"  {name.replace('_', ' ')}: {value}")

    if argv:
        path = export_workbook(app.services, Path(argv[0]))
        print(f"Exported to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
