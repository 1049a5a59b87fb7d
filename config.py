import os
import sys

from dotenv import load_dotenv

from enums.runtime_environment import RuntimeEnvironment

# Load .env but don't override existing environment variables
# This allows test suites to set RUNTIME_ENVIRONMENT=TEST before import
load_dotenv(".env", override=False)

# Thousands / decimal separators per supported price locale
PRICE_LOCALE_SEPARATORS = {
    "tr-TR": (".", ","),
    "de-DE": (".", ","),
    "en-US": (",", "."),
    "en-GB": (",", "."),
    "fr-FR": (" ", ","),
}

# Parse RUNTIME_ENVIRONMENT with clear error message on misconfiguration
try:
    RUNTIME_ENVIRONMENT = RuntimeEnvironment(os.environ.get("RUNTIME_ENVIRONMENT", "DEV"))
except ValueError as e:
    valid_values = [env.value for env in RuntimeEnvironment]
    print(f"\n ERROR: Invalid RUNTIME_ENVIRONMENT configuration\n", file=sys.stderr)
    print(f"Reason: {e}", file=sys.stderr)
    print(f"Valid values: {', '.join(valid_values)}", file=sys.stderr)
    print(f"\nAdd to .env: RUNTIME_ENVIRONMENT={valid_values[0]}\n", file=sys.stderr)
    sys.exit(1)

# Price display (one currency per business, no conversion)
CURRENCY_SYMBOL = os.environ.get("CURRENCY_SYMBOL", "₺")
PRICE_LOCALE = os.environ.get("PRICE_LOCALE", "tr-TR")
if PRICE_LOCALE not in PRICE_LOCALE_SEPARATORS:
    print(f"\n ERROR: Invalid PRICE_LOCALE configuration\n", file=sys.stderr)
    print(f"Valid values: {', '.join(PRICE_LOCALE_SEPARATORS)}", file=sys.stderr)
    print(f"Current value: {PRICE_LOCALE}\n", file=sys.stderr)
    sys.exit(1)

# Handoff: messaging deep links and order endpoints
MESSAGING_PROVIDER_HOST = os.environ.get("MESSAGING_PROVIDER_HOST", "wa.me")
CATALOG_API_URL = os.environ.get("CATALOG_API_URL", "http://localhost:3000/api/fastfood").rstrip("/")
ORDER_API_URL = os.environ.get("ORDER_API_URL", f"{CATALOG_API_URL}/orders")
ORDER_MESSAGE_FOOTER = os.environ.get(
    "ORDER_MESSAGE_FOOTER",
    "_Tık Profil üzerinden gönderilmiştir_\nhttps://tikprofil.com"
)

# Parse numeric settings with error handling
try:
    HTTP_TIMEOUT_SECONDS = float(os.environ.get("HTTP_TIMEOUT_SECONDS", "10"))
    CATALOG_POLL_INTERVAL_SECONDS = float(os.environ.get("CATALOG_POLL_INTERVAL_SECONDS", "5"))
    MIN_PHONE_LENGTH = int(os.environ.get("MIN_PHONE_LENGTH", "10"))
    LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "7" if RUNTIME_ENVIRONMENT == RuntimeEnvironment.DEV else "5"))
    if HTTP_TIMEOUT_SECONDS <= 0 or CATALOG_POLL_INTERVAL_SECONDS <= 0:
        raise ValueError("timeouts and poll intervals must be positive")
    if MIN_PHONE_LENGTH < 1:
        raise ValueError(f"MIN_PHONE_LENGTH must be positive (got: {MIN_PHONE_LENGTH})")
except ValueError as e:
    print(f"\n ERROR: Invalid numeric configuration\n", file=sys.stderr)
    print(f"Reason: {e}", file=sys.stderr)
    print(f"Check HTTP_TIMEOUT_SECONDS, CATALOG_POLL_INTERVAL_SECONDS, MIN_PHONE_LENGTH, LOG_RETENTION_DAYS\n", file=sys.stderr)
    sys.exit(1)

# Order records
DB_NAME = os.environ.get("DB_NAME", "orders.db")
DB_URL = os.environ.get("DB_URL", f"sqlite+aiosqlite:///data/{DB_NAME}")

# Logging Configuration
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR, CRITICAL
LOG_MASK_SECRETS = os.environ.get("LOG_MASK_SECRETS", "true") == "true"  # Mask customer PII in logs
LOG_DIR = os.environ.get("LOG_DIR", "logs")
