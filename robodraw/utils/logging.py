"""
robodraw logging

Modules log through the standard logger hierarchy:

    import logging
    logger = logging.getLogger(__name__)

Call setup_logging() once at application start to attach handlers to the
'robodraw' logger; every robodraw.* logger then uses its formatting.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from robodraw.config import GLOBAL_LOGGING_LEVEL_THRESHOLD, LOGGING_LEVEL_FILE, LOGGING_LEVEL_TERMINAL


class RobodrawFormatter(logging.Formatter):
    def format(self, record):
        # robodraw.execution.engine.detail -> robodraw.execution.engine
        if record.name.startswith('robodraw.'):
            parts = record.name.split('.')
            if len(parts) > 3:
                record.name = '.'.join(parts[:3])
        return super().format(record)


def setup_logging(
    terminal_level: int = LOGGING_LEVEL_TERMINAL,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure the 'robodraw' logger.

    Args:
        terminal_level: level for the stdout handler
        log_file: optional file receiving INFO and above

    Returns:
        The package logger
    """
    logger = logging.getLogger('robodraw')
    logger.setLevel(GLOBAL_LOGGING_LEVEL_THRESHOLD)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(terminal_level)
    console_handler.setFormatter(RobodrawFormatter('%(name)s - %(levelname)s - %(message)s'))
    logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, mode='w')
        file_handler.setLevel(LOGGING_LEVEL_FILE)
        file_handler.setFormatter(RobodrawFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    # Handlers live on 'robodraw'; avoid duplicates through the root logger
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    full_name = f"robodraw.{name}" if not name.startswith('robodraw') else name
    return logging.getLogger(full_name)
