import json as jsonlib
import logging
import logging.config
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder
from structlog.typing import Processor

from dicomfmt.loggers.processors import (
    CallPrettifier,
    PathPrettifier,
    ZonedTimeStamper,
)

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
DEFAULT_LOG_LEVEL = "WARNING"

LOG_DIR_NAME = Path(".dicomfmt/logs")

# rotate the JSON log at 10 MiB, keep five old files
JSON_LOG_MAX_BYTES = 10 * 1024 * 1024
JSON_LOG_BACKUPS = 5


class LoggingManager:
    """
    Manages the configuration and initialization of a structured logger.

    Console output always goes to stderr: stdout belongs to the list of
    series directories that the command line tool prints.

    Environment variables (``NAME`` is the upper-cased logger name):

    - ``NAME_LOG_LEVEL``: initial level, defaults to ``WARNING``.
    - ``NAME_ENABLE_JSON_LOGGING``: ``1`` adds a rotating JSON log file
      under ``.dicomfmt/logs``.
    - ``NAME_LOG_TIMEZONE``: timezone of the timestamps, defaults to ``UTC``.

    Examples
    --------
    Initialize with default settings:
        >>> manager = LoggingManager(name="dicomfmt")
        >>> logger = manager.get_logger()
        >>> logger.info("Info message")
    """

    def __init__(
        self,
        name: str,
        base_dir: Path | None = None,
        log_dir: Path = LOG_DIR_NAME,
    ) -> None:
        self.name = name
        self.base_dir = base_dir or Path.cwd()
        self.log_dir = log_dir
        self.level = self.env_level
        self.enable_json_logging = self._env("ENABLE_JSON_LOGGING", "0") == "1"
        self.timezone = self._env("LOG_TIMEZONE", "UTC")
        self._initialize_logger()

    def _env(self, suffix: str, default: str) -> str:
        return os.environ.get(f"{self.name.upper()}_{suffix}", default)

    @property
    def env_level(self) -> str:
        return self._env("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

    @property
    def pre_chain(self) -> List[Processor]:
        """Processors shared by structlog and foreign stdlib records."""
        return [
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.PositionalArgumentsFormatter(),
            CallsiteParameterAdder(
                [
                    CallsiteParameter.MODULE,
                    CallsiteParameter.FUNC_NAME,
                    CallsiteParameter.LINENO,
                ]
            ),
            PathPrettifier(base_dir=self.base_dir),
            structlog.stdlib.ExtraAdder(),
            structlog.processors.StackInfoRenderer(),
        ]

    def _console_formatter(self) -> Dict[str, Any]:
        # no colors: output is usually piped or captured
        renderer = structlog.dev.ConsoleRenderer(
            colors=False,
            sort_keys=False,
            exception_formatter=structlog.dev.RichTracebackFormatter(
                width=-1,
                show_locals=False,
            ),
        )
        return {
            "()": structlog.stdlib.ProcessorFormatter,
            "processors": [
                ZonedTimeStamper(fmt="%H:%M:%S", timezone=self.timezone),
                CallPrettifier(concise=True),
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            "foreign_pre_chain": self.pre_chain,
        }

    def _json_formatter(self) -> Dict[str, Any]:
        return {
            "()": structlog.stdlib.ProcessorFormatter,
            "processors": [
                ZonedTimeStamper(timezone=self.timezone),
                CallPrettifier(concise=False),
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.dict_tracebacks,
                structlog.processors.JSONRenderer(
                    serializer=jsonlib.dumps, indent=2
                ),
            ],
            "foreign_pre_chain": self.pre_chain,
        }

    def _json_file_handler(self) -> Dict[str, Any]:
        """Create a timestamped log file and point ``latest.log`` at it."""
        self.log_dir.mkdir(parents=True, exist_ok=True)
        logfile = (
            self.log_dir / f"{self.name}_{datetime.now():%Y-%m-%d_%H-%M-%S}.log"
        )

        latest = self.log_dir / "latest.log"
        if latest.exists() or latest.is_symlink():
            latest.unlink()
        latest.symlink_to(logfile.name)

        return {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "json",
            "filename": logfile,
            "maxBytes": JSON_LOG_MAX_BYTES,
            "backupCount": JSON_LOG_BACKUPS,
        }

    @property
    def base_logging_config(self) -> Dict[str, Any]:
        """
        Build the ``logging.config.dictConfig`` mapping for this logger.

        Returns
        -------
        dict
            Console handler on stderr, plus the JSON file handler when
            JSON logging is enabled.
        """
        handlers: Dict[str, Any] = {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "console",
                "stream": "ext://sys.stderr",
            },
        }
        if self.enable_json_logging:
            handlers["json"] = self._json_file_handler()

        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": self._console_formatter(),
                "json": self._json_formatter(),
            },
            "handlers": handlers,
            "loggers": {
                self.name: {
                    "handlers": list(handlers),
                    "level": self.level,
                    "propagate": False,
                },
            },
        }

    def _initialize_logger(self) -> None:
        logging.config.dictConfig(self.base_logging_config)
        structlog.configure(
            processors=[
                *self.pre_chain,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    def get_logger(self) -> structlog.stdlib.BoundLogger:
        """Retrieve the logger instance."""
        return structlog.get_logger(self.name)

    def configure_logging(
        self, level: str = DEFAULT_LOG_LEVEL
    ) -> structlog.stdlib.BoundLogger:
        """
        Reconfigure the logger at a new level.

        Raises
        ------
        ValueError
            If `level` is not a standard logging level name.
        """
        level_upper = level.upper()
        if level_upper not in VALID_LOG_LEVELS:
            msg = f"Invalid logging level: {level}"
            raise ValueError(msg)

        self.level = level_upper
        self._initialize_logger()
        return self.get_logger()
