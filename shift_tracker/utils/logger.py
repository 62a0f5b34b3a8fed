import logging
import os
from typing import Dict, Any, Optional

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

def log_event(
    action: str,
    details: Optional[Dict[str, Any]] = None,
    user_id: Optional[str] = None
):
    """
    Log a shift event to the application logger
    """
    log_message = f"Action: {action}"
    if user_id:
        log_message += f" | User: {user_id}"
    if details:
        log_message += f" | Details: {details}"

    logger.info(log_message)

def log_error(message: str, error: Exception, user_id: Optional[str] = None):
    """
    Log an error with context
    """
    error_message = f"Error: {message} | Exception: {str(error)}"
    if user_id:
        error_message += f" | User: {user_id}"

    logger.error(error_message)

def log_warning(message: str, user_id: Optional[str] = None):
    """
    Log a warning
    """
    warning_message = f"Warning: {message}"
    if user_id:
        warning_message += f" | User: {user_id}"

    logger.warning(warning_message)

def log_debug(message: str, details: Optional[Dict[str, Any]] = None):
    debug_message = f"Debug: {message}"
    if details:
        debug_message += f" | Details: {details}"

    logger.debug(debug_message)

# Event type constants for consistency
class EventTypes:
    SHIFT_SAVED = "shift_saved"
    SHIFT_DELETED = "shift_deleted"
    SHIFT_TRANSFERRED = "shift_transferred"

    SUBSCRIPTION_OPENED = "subscription_opened"
    SUBSCRIPTION_CLOSED = "subscription_closed"
    SUBSCRIPTION_ERROR = "subscription_error"
