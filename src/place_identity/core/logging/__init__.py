"""
Logging configuration module for structured logging.

This module configures the application's logging system using structlog.
JSON output is used in production and human-readable console output in
development. Request-scoped values (the correlation id) are merged from
``structlog.contextvars`` into every event.
"""

import logging

import structlog


def configure_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configures the application's logging system.

    Args:
        log_level: Minimum level emitted by the standard library root logger.
        json_logs: Render events as JSON instead of coloured console lines.
    """
    logging.basicConfig(format="%(message)s", level=getattr(logging, log_level.upper(), logging.INFO))

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def mask_email(email: str) -> str:
    """Mask an email address for audit logs, keeping its shape.

    Example: ``'jane.doe@example.com'`` -> ``'ja***@ex***.com'``
    """
    if not email:
        return "[empty]"
    if "@" not in email:
        return f"{email[:2]}***"

    local, domain = email.split("@", 1)
    domain_parts = domain.split(".")
    if len(domain_parts) > 1:
        masked_domain = f"{domain_parts[0][:2]}***.{domain_parts[-1]}"
    else:
        masked_domain = f"{domain[:2]}***"
    return f"{local[:2]}***@{masked_domain}"


def mask_token(token: str) -> str:
    """Show only the first and last four characters of a token."""
    if not token:
        return "[empty]"
    if len(token) <= 8:
        return "*" * len(token)
    return f"{token[:4]}***{token[-4:]}"


logger = structlog.get_logger()
