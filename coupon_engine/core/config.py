import logging
import os
from dotenv import load_dotenv

# grab env vars from .env file
load_dotenv()


class Settings:
    # logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # label used in human readable reasons, e.g. "Rs.100.00"
    CURRENCY_LABEL: str = os.getenv("CURRENCY_LABEL", "Rs.")


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """set up root logging for scripts embedding the engine"""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
