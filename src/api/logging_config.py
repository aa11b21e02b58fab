import logging
import sys


def setup_logging(level: str = "INFO"):
    """
    Configure application logging.

    Logs go to stdout with timestamps, level and logger name, which plays
    well with container log collectors.
    """
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce SQLAlchemy noise in logs
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
