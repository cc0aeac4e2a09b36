"""
Logging utilities for EduVerse Backend

Provides centralized logging configuration and request logging.
"""

import os
import logging
import logging.config
from typing import Optional, Dict, Any
import yaml

DEFAULT_LOGGING_CONFIG: Dict[str, Any] = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'default': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        },
        'detailed': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(module)s - %(funcName)s - %(lineno)d - %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        },
        'json': {
            'format': '{"timestamp": "%(asctime)s", "logger": "%(name)s", "level": "%(levelname)s", "module": "%(module)s", "function": "%(funcName)s", "line": %(lineno)d, "message": "%(message)s"}',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        }
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'level': 'INFO',
            'formatter': 'default',
            'stream': 'ext://sys.stdout'
        }
    },
    'root': {
        'level': 'INFO',
        'handlers': ['console']
    },
    'loggers': {
        'eduverse': {
            'level': 'INFO',
            'handlers': ['console'],
            'propagate': False
        },
        'uvicorn.access': {
            'level': 'WARNING'
        }
    }
}


def load_logging_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load a dictConfig mapping

    Args:
        config_path: Optional YAML file overriding the default configuration

    Returns:
        dict: Logging configuration
    """
    if config_path and os.path.exists(config_path):
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
        if isinstance(config, dict):
            return config
        raise ValueError(f"Logging config {config_path} is not a mapping")

    return {
        key: (dict(value) if isinstance(value, dict) else value)
        for key, value in DEFAULT_LOGGING_CONFIG.items()
    }


def setup_logging(
    config_path: Optional[str] = None,
    log_level: Optional[str] = None,
    log_format: Optional[str] = None
) -> Dict[str, Any]:
    """
    Setup logging configuration

    Args:
        config_path: Path to a YAML logging configuration file
        log_level: Override log level
        log_format: Override log format ('default', 'detailed', 'json')

    Returns:
        dict: The configuration that was applied
    """
    config = load_logging_config(config_path)
    handlers = {name: dict(cfg) for name, cfg in config.get('handlers', {}).items()}
    loggers = {name: dict(cfg) for name, cfg in config.get('loggers', {}).items()}
    root = dict(config.get('root', {}))

    if log_level:
        log_level = log_level.upper()
        for name, logger_config in loggers.items():
            if name != 'uvicorn.access':
                logger_config['level'] = log_level
        for handler_config in handlers.values():
            handler_config['level'] = log_level
        if root:
            root['level'] = log_level

    if log_format and log_format in config.get('formatters', {}):
        for handler_config in handlers.values():
            handler_config['formatter'] = log_format

    config['handlers'] = handlers
    config['loggers'] = loggers
    if root:
        config['root'] = root

    logging.config.dictConfig(config)
    logging.getLogger(__name__).debug("Logging configured")
    return config


class RequestLogger:
    """Logger for HTTP requests"""

    def __init__(self, name: str = "eduverse.requests"):
        self.logger = logging.getLogger(name)

    def log_request(
        self,
        method: str,
        url: str,
        status_code: int,
        response_time: float,
        user_id: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ):
        """Log HTTP request"""
        self.logger.info(
            f"{method} {url} {status_code} {response_time:.3f}s",
            extra={
                'request_method': method,
                'request_url': url,
                'response_status': status_code,
                'response_time': response_time,
                'user_id': user_id,
                'ip_address': ip_address,
                'user_agent': user_agent,
                'event_type': 'http_request'
            }
        )
