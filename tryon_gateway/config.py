"""
Configuration module for the Try-On Gateway
Contains logger setup and environment variables
"""

import os
import logging
from typing import Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


# -------------------------
# Logger Setup
# -------------------------
def setup_logger(
    name: str = __name__, log_file: Optional[str] = "tryon_gateway.log"
) -> logging.Logger:
    """
    Set up and return a logger with file and console handlers

    Args:
        name: Logger name (usually __name__)
        log_file: Path to log file, or None to log to the console only

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    # Avoid adding duplicate handlers
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


def _parse_number_env(name: str, default: float, *, minimum: float = 0) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a numeric value") from None
    if value < minimum:
        raise RuntimeError(f"{name} must be greater than or equal to {minimum}")
    return value


# Create the main application logger
logger = setup_logger("tryon_gateway", os.getenv("LOG_FILE", "tryon_gateway.log") or None)

# -------------------------
# Environment Variables
# -------------------------
HUGGINGFACE_API_KEY = os.getenv("HUGGINGFACE_API_KEY")
APP_SECRET = os.getenv("APP_SECRET")  # Required by the admin endpoints

# supabase
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")
SUPABASE_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_KEY")

# -------------------------
# Gateway tuning
# -------------------------
TRYON_MAX_RETRIES = int(_parse_number_env("TRYON_MAX_RETRIES", 3, minimum=1))
TRYON_RETRY_DELAY_SECONDS = _parse_number_env("TRYON_RETRY_DELAY_SECONDS", 5.0)
FETCH_TIMEOUT_SECONDS = _parse_number_env("FETCH_TIMEOUT_SECONDS", 60.0, minimum=1)
INVOKE_TIMEOUT_SECONDS = _parse_number_env("INVOKE_TIMEOUT_SECONDS", 300.0, minimum=1)
MAX_CONCURRENT_CALLS_PER_BACKEND = int(
    _parse_number_env("MAX_CONCURRENT_CALLS_PER_BACKEND", 4, minimum=1)
)
DEFAULT_GARMENT_DESCRIPTION = os.getenv("DEFAULT_GARMENT_DESCRIPTION") or "A shirt"


# Log configuration status
logger.info("Configuration loaded successfully")
logger.debug(f"HUGGINGFACE_API_KEY configured: {bool(HUGGINGFACE_API_KEY)}")
logger.debug(f"APP_SECRET configured: {bool(APP_SECRET)}")
logger.debug(f"SUPABASE_URL configured: {bool(SUPABASE_URL)}")
logger.debug(f"SUPABASE_SERVICE_KEY configured: {bool(SUPABASE_SERVICE_KEY)}")
logger.debug(
    f"Retry policy: {TRYON_MAX_RETRIES} attempts, {TRYON_RETRY_DELAY_SECONDS}s delay"
)
