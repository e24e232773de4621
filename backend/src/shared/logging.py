"""
Logging utilities for Lambda handlers.
"""
import logging
import json

# Configure logger
logger = logging.getLogger('hostel_complaints')
logger.setLevel(logging.INFO)

# Add handler if not already configured
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    logger.addHandler(handler)


def log_event(event: dict) -> None:
    """Log incoming Lambda event for debugging."""
    try:
        # Student names and descriptions travel in the body
        safe_event = {k: v for k, v in event.items() if k not in ['body', 'headers']}
        logger.info(f"Lambda event: {json.dumps(safe_event, default=str)}")
    except (TypeError, ValueError) as e:
        logger.warning(f"Could not log event: {e}")
