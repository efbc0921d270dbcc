import logging
import re
import sys

# Third-party loggers that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")

_API_KEY_PARAM = re.compile(r"(apikey=)[^&\s\"']+", re.IGNORECASE)


class ApiKeyRedactingFilter(logging.Filter):
    """Masks ``apikey=`` query values in rendered log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _API_KEY_PARAM.sub(r"\1***", message)
        if redacted != message:
            record.msg = redacted
            record.args = ()
        return True


def setup_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s [gas-oracle] [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    handler.addFilter(ApiKeyRedactingFilter())

    root = logging.getLogger()
    root.setLevel(level)
    # Avoid duplicate handlers if reload
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, root.level))
