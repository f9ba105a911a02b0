import logging

LOG_FORMAT = "%(asctime)s %(threadName)s [%(name)s] %(levelname)-8s %(message)s"


def setup_logging(level: int = logging.INFO):
    logging.basicConfig(level=level, format=LOG_FORMAT)
