"""Logging for PDF extraction runs: JSON log file plus a stderr console.

Every extraction decision is logged at INFO (native char and page counts,
the quality verdict, whether OCR text replaced native text), and per-page
OCR lengths at DEBUG. The JSON file keeps those records machine-readable
under the keys ``timestamp``, ``level``, ``component`` and ``message``, so
a batch of documents can be audited afterwards. The console handler writes
to stderr because the CLI prints its JSON result on stdout.

Document text is never logged, only lengths and counts. Call
setup_logging() once at process startup; module code uses
logging.getLogger(__name__).
"""

import logging
import logging.handlers
import sys
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter


def setup_logging(
    log_dir: str = "logs",
    log_level_file: int = logging.DEBUG,
    log_level_console: int = logging.INFO,
    max_bytes: int = 10_485_760,  # 10MB
    backup_count: int = 5,
) -> None:
    """Route extraction logs to ``<log_dir>/extraction.log`` and stderr.

    Creates the log directory if it does not exist. Clears any existing
    handlers on the root logger so repeated calls do not duplicate output.

    Args:
        log_dir: Directory for log files.
        log_level_file: Logging level for the file handler (default DEBUG).
        log_level_console: Logging level for the console handler (default INFO).
        max_bytes: Maximum size per log file before rotation (default 10MB).
        backup_count: Number of rotated backup files to keep (default 5).
    """
    Path(log_dir).mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture everything; handlers filter
    root_logger.handlers.clear()

    # Full DEBUG trail, one JSON object per line
    file_handler = logging.handlers.RotatingFileHandler(
        filename=str(Path(log_dir) / "extraction.log"),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level_file)
    file_handler.setFormatter(
        JsonFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
            rename_fields={
                "asctime": "timestamp",
                "levelname": "level",
                "name": "component",
            },
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )

    # Operator view; stdout stays reserved for results
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level_console)
    console_handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    # pdfminer logs every content-stream token at DEBUG; Pillow logs each
    # decoded image chunk
    for noisy in ("pdfminer", "PIL"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
