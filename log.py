import logging
import sys
from config import Config

RESET = "\033[0m"
BLUE = "\033[34m"

# level -> (emoji, colour)
LEVEL_STYLES = {
    logging.DEBUG:    ("🐞", "\033[36m"),
    logging.INFO:     ("ℹ️ ", "\033[32m"),
    logging.WARNING:  ("⚠️ ", "\033[33m"),
    logging.ERROR:    ("❌ ", "\033[1;31m"),
    logging.CRITICAL: ("🔥 ", "\033[1;31m"),
}

# Plain lines for the log file, no colour codes
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s :: %(message)s"


class ConsoleFormatter(logging.Formatter):
    """Coloured console lines: [TIME] EMOJI LEVEL logger :: message"""

    def format(self, record):
        emoji, color = LEVEL_STYLES.get(record.levelno, ("", RESET))
        log_fmt = (
            f"{BLUE}[%(asctime)s]{RESET} "
            f"{color}{emoji}%(levelname)-8s{RESET} %(name)s :: "
            f"{color}%(message)s{RESET}"
        )
        return logging.Formatter(log_fmt, datefmt="%H:%M:%S").format(record)


def get_logger(name):
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)

    if not logger.handlers:
        ch = logging.StreamHandler(sys.stdout)
        ch.setFormatter(ConsoleFormatter())
        logger.addHandler(ch)

        # Sonarr runs notify.py from its own working dir, so LOG_FILE should be absolute
        if Config.LOG_FILE:
            fh = logging.FileHandler(Config.LOG_FILE, encoding="utf-8")
            fh.setFormatter(logging.Formatter(FILE_FORMAT))
            logger.addHandler(fh)

    # Suppress verbose loggers
    logging.getLogger("pyrogram").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return logger
