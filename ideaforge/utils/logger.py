import logging
import sys
from ideaforge.utils.config import config

# stdout carries command output (including --json), so every log record goes to stderr
LOG_STREAM = sys.stderr

# Third-party loggers that log each request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "google_genai", "pymongo")

# Configure root logger - set to ERROR by default to suppress all non-ideaforge logs
logging.basicConfig(level=logging.ERROR, format=config.log_format, stream=LOG_STREAM)

# Only the ideaforge logger follows LOG_LEVEL
ideaforge_logger = logging.getLogger('ideaforge')
ideaforge_logger.setLevel(config.log_level)

ideaforge_handler = logging.StreamHandler(LOG_STREAM)
ideaforge_handler.setFormatter(logging.Formatter(config.log_format))

# Re-importing must not stack handlers
for handler in list(ideaforge_logger.handlers):
    ideaforge_logger.removeHandler(handler)

ideaforge_logger.addHandler(ideaforge_handler)

# The root handler would print every record a second time
ideaforge_logger.propagate = False

for name in NOISY_LOGGERS:
    logging.getLogger(name).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)
