# --- src/dcmna_core/log_config.py ---
import logging
import sys

def setup_logging(level=logging.INFO):
    """ Configures console logging for the analysis engine. Logs go to stderr; stdout carries reports. """
    log_formatter = logging.Formatter(
        "%(asctime)s [%(levelname)-5.5s] [%(name)s] %(message)s"
    )
    package_logger = logging.getLogger("dcmna_core")

    # Replace handlers left over from a previous configuration call.
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(log_formatter)
    package_logger.setLevel(level)
    package_logger.addHandler(console_handler)
    package_logger.propagate = False
    package_logger.debug("Logging configured.")
