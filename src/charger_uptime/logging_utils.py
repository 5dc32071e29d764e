import logging


def setup_logging(debug: bool = False) -> None:
    """Configure charger-uptime logging on stderr, keeping stdout for the report."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
