import logging
import os
from logging.handlers import RotatingFileHandler


def setup_logging(level="INFO", log_folder=None):
    logger = logging.getLogger()
    logger.setLevel(level)

    # Create console handler
    c_handler = logging.StreamHandler()
    c_handler.setLevel(level)

    # Create formatters and add them to handlers
    c_format = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    c_handler.setFormatter(c_format)
    logger.addHandler(c_handler)

    if log_folder:
        os.makedirs(log_folder, exist_ok=True)

        # Configure file handler with rotation
        log_file = os.path.join(log_folder, 'qtmosaic.log')
        f_handler = RotatingFileHandler(log_file, maxBytes=10000000, backupCount=5)  # Rotate after 10MB, keep 5 backups
        f_handler.setLevel(level)
        f_handler.setFormatter(c_format)
        logger.addHandler(f_handler)

    return logger
