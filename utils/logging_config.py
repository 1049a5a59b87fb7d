"""
Logging setup for the order engine.

One console handler and one daily rotated file handler on the root logger,
both optionally filtered through SecretMaskingFilter. Modules only ever do
`logger = logging.getLogger(__name__)`.
"""

import logging
import logging.handlers
import re
from pathlib import Path
from typing import Pattern

import config

LOG_FORMAT = '%(asctime)s | %(name)-28s | %(levelname)-8s | %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LOG_FILE_NAME = "orders.log"


class SecretMaskingFilter(logging.Filter):
    """
    Redacts customer PII and credentials before a record is emitted.

    Customer names stay readable (free text, needed to follow an order);
    anything that reaches a customer directly is replaced:
    e-mail addresses, phone numbers (also inside messaging deep links),
    delivery addresses, bearer/API tokens.
    """

    PATTERNS: list[tuple[Pattern, str]] = [
        # Credentials for catalog / order endpoints
        (re.compile(r'(Bearer\s+)([A-Za-z0-9_\-\.]+)', re.IGNORECASE), r'\1[REDACTED_BEARER_TOKEN]'),
        (re.compile(r'((?:api[_-]?key|token)["\']?\s*[:=]\s*["\']?)([A-Za-z0-9_\-:]{20,})', re.IGNORECASE), r'\1[REDACTED_TOKEN]'),

        (re.compile(r'\b[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}\b'), '[REDACTED_EMAIL]'),

        # Phone fields, whatever the formatting
        (re.compile(r'(phone["\']?\s*[:=]\s*["\']?)([+\d][\d\s\-()]{6,}\d)', re.IGNORECASE), r'\1[REDACTED_PHONE]'),

        # Messaging deep links carry the destination number
        (re.compile(r'(https?://[^/\s]+/)(\+?\d{7,15})(\?)'), r'\1[REDACTED_PHONE]\3'),

        # Free standing numbers: "+90 532 123 45 67", "+905321234567", "(555) 123-4567"
        (re.compile(r'(?<![\w.])\+?\d{1,3}[\s\-]?\(?\d{3}\)?[\s\-]?\d{3}[\s\-]?\d{2}[\s\-]?\d{2}\b'), '[REDACTED_PHONE]'),
        (re.compile(r'(?<![\w.])\+?\(?\d{3}\)?[\s\-]?\d{3}[\s\-]?\d{4}\b'), '[REDACTED_PHONE]'),

        (re.compile(r'(address["\']?\s*[:=]\s*["\']?)([^"\']{10,})', re.IGNORECASE), r'\1[REDACTED_ADDRESS]'),
    ]

    def mask(self, text: str) -> str:
        for pattern, replacement in self.PATTERNS:
            text = pattern.sub(replacement, text)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if record.msg:
            record.msg = self.mask(str(record.msg))
        if isinstance(record.args, tuple):
            record.args = tuple(self.mask(arg) if isinstance(arg, str) else arg for arg in record.args)
        # Records are rewritten, never dropped
        return True


def _configure(handler: logging.Handler, level: int, mask_secrets: bool) -> logging.Handler:
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    handler.setLevel(level)
    if mask_secrets:
        handler.addFilter(SecretMaskingFilter())
    return handler


def setup_logging(log_dir: str | Path | None = None):
    """
    Install the engine's log handlers on the root logger.

    Call once at startup; calling again replaces the handlers.

    Settings (config.py):
        LOG_LEVEL           DEBUG / INFO / WARNING / ERROR
        LOG_DIR             directory of orders.log
        LOG_RETENTION_DAYS  rotated files kept (rotation at midnight)
        LOG_MASK_SECRETS    redact PII and credentials
    """
    log_path = Path(log_dir or config.LOG_DIR)
    log_path.mkdir(parents=True, exist_ok=True)

    level = getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)
    mask_secrets = config.LOG_MASK_SECRETS

    handlers = [
        _configure(
            logging.handlers.TimedRotatingFileHandler(
                filename=log_path / LOG_FILE_NAME,
                when="midnight",
                backupCount=config.LOG_RETENTION_DAYS,
                encoding="utf-8"
            ),
            level,
            mask_secrets
        ),
        _configure(logging.StreamHandler(), level, mask_secrets),
    ]

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)

    logging.info(
        f"Logging initialized: level={config.LOG_LEVEL}, retention={config.LOG_RETENTION_DAYS} days, "
        f"masking={'on' if mask_secrets else 'off'}, file={log_path / LOG_FILE_NAME}"
    )
