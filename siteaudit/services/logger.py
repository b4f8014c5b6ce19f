import logging

LOG_FORMAT = "[SITEAUDIT] %(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)
    # aiohttp access/client chatter is noise at INFO
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
