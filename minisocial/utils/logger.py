"""
Structured logging for MiniSocial.

Modules call ``get_logger(__name__)`` and log with keyword fields:

    logger.info("Post created", post_id=post.id, author_id=session.id)

Keyword fields are captured into the record's ``extra`` dict, so the json
sink serializes them and the text sink appends them after the message.
``setup_logger`` is called once by the application at startup.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger as _root_logger

TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan> | "
    "{message} | {extra}"
)

# Records that were not emitted through get_logger still need extra[module]
_root_logger.configure(extra={"module": "minisocial"})


def setup_logger(
    log_level: str = "INFO",
    log_format: str = "json",
    file_path: Optional[str] = None,
    max_bytes: int = 10485760,
    backup_count: int = 5,
) -> None:
    """Replace all sinks with a stderr sink and an optional rotating file sink"""
    serialize = log_format == "json"
    level = log_level.upper()
    
    _root_logger.remove()
    _root_logger.add(
        sys.stderr,
        level=level,
        format=TEXT_FORMAT,
        serialize=serialize,
        colorize=not serialize,
    )
    
    if file_path:
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        _root_logger.add(
            file_path,
            level=level,
            format=TEXT_FORMAT,
            serialize=serialize,
            rotation=max_bytes,
            retention=backup_count,
            encoding="utf-8",
            enqueue=False,
        )


def get_logger(name: str):
    """Return a logger bound to the calling module's name"""
    return _root_logger.bind(module=name)
