"""
Logging configuration for setup-python-cache
"""

import logging
import logging.handlers
import os
import sys
from typing import Sequence, Union
from .validation import InputValidator


class SecureLogFormatter(logging.Formatter):
    """Custom formatter that masks tokens in log records"""

    def __init__(self, fmt: str = None, datefmt: str = None):
        super().__init__(fmt, datefmt)
        self.github_token = os.getenv('GITHUB_TOKEN')

    def format(self, record: logging.LogRecord) -> str:
        # Sanitize the message before formatting
        if hasattr(record, 'msg') and isinstance(record.msg, str):
            record.msg = InputValidator.sanitize_log_message(
                record.msg,
                self.github_token
            )

        # Sanitize args if present
        if hasattr(record, 'args') and record.args and isinstance(record.args, tuple):
            sanitized_args = []
            for arg in record.args:
                if isinstance(arg, str):
                    sanitized_args.append(
                        InputValidator.sanitize_log_message(arg, self.github_token)
                    )
                else:
                    sanitized_args.append(arg)
            record.args = tuple(sanitized_args)

        return super().format(record)


def setup_logging(
    log_level: str = None,
    log_file: str = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5
) -> logging.Logger:
    """
    Setup logging configuration for setup-python-cache

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path
        max_bytes: Maximum log file size before rotation
        backup_count: Number of backup files to keep

    Returns:
        Configured logger instance
    """

    # Get log level from environment or parameter
    level_str = log_level or os.getenv('SETUP_PYTHON_CACHE_LOG_LEVEL', 'INFO')
    level = getattr(logging, level_str.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    formatter = SecureLogFormatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Console handler on stderr, stdout carries step outputs
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            log_dir = os.path.dirname(log_file)
            if log_dir and not os.path.exists(log_dir):
                os.makedirs(log_dir, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding='utf-8'
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

        except OSError as e:
            root_logger.warning(f"Failed to setup file logging: {e}")

    _configure_specific_loggers(level)

    logger = logging.getLogger(__name__)
    logger.debug(f"Logging initialized - Level: {level_str}")

    return root_logger


def _configure_specific_loggers(level: int):
    """Configure specific logger levels"""

    # Reduce noise from external libraries
    logging.getLogger('requests').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    logging.getLogger('setup_python_cache').setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def format_command(command: Union[str, Sequence[str]]) -> str:
    """Render a command for log output"""
    if isinstance(command, str):
        return command
    return " ".join(str(part) for part in command)


# Utility functions for common logging patterns
def log_command_execution(logger: logging.Logger,
                          command: Union[str, Sequence[str]],
                          exit_code: int,
                          duration: float = None):
    """Log an external command and its exit status"""
    rendered = format_command(command)

    if duration is not None:
        logger.debug(f"Command '{rendered}' exited with {exit_code} - Duration: {duration:.2f}s")
    else:
        logger.debug(f"Command '{rendered}' exited with {exit_code}")


def log_cache_key(logger: logging.Logger, kind: str, cache_key: str):
    """Log a computed cache key"""
    logger.debug(f"Cache {kind} key - {cache_key}")
