"""
structlog configuration shared by the command-line entry points.
"""

import logging

import structlog


def configure_logging(level: str = "INFO"):
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level)
        ),
    )
