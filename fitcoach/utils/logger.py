import json
import sys
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    SUCCESS = "SUCCESS"


class Colors:
    """ANSI color codes for console output"""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'

    BRIGHT_BLACK = '\033[90m'
    BRIGHT_RED = '\033[91m'
    BRIGHT_GREEN = '\033[92m'
    BRIGHT_YELLOW = '\033[93m'
    BRIGHT_BLUE = '\033[94m'
    BRIGHT_CYAN = '\033[96m'
    WHITE = '\033[37m'


class FitCoachLogger:
    """Colorized service logger with a consistent ``[time] [SERVICE/CONTEXT] [LEVEL]`` layout"""

    def __init__(self, service_name: str = "FITCOACH", enable_colors: bool = True, min_level: LogLevel = LogLevel.DEBUG):
        self.service_name = service_name.upper()
        self.enable_colors = enable_colors
        self.min_level = min_level

        self.level_colors = {
            LogLevel.DEBUG: Colors.BRIGHT_CYAN,
            LogLevel.INFO: Colors.BRIGHT_BLUE,
            LogLevel.WARNING: Colors.BRIGHT_YELLOW,
            LogLevel.ERROR: Colors.BRIGHT_RED,
            LogLevel.SUCCESS: Colors.BRIGHT_GREEN,
        }

    _ORDER = [LogLevel.DEBUG, LogLevel.INFO, LogLevel.SUCCESS, LogLevel.WARNING, LogLevel.ERROR]

    def _enabled(self, level: LogLevel) -> bool:
        return self._ORDER.index(level) >= self._ORDER.index(self.min_level)

    def _get_timestamp(self) -> str:
        return datetime.now().strftime("%H:%M:%S.%f")[:-3]

    def _colorize(self, text: str, color: str) -> str:
        if not self.enable_colors:
            return text
        return f"{color}{text}{Colors.RESET}"

    def _format_value(self, value: Any) -> str:
        if isinstance(value, (dict, list)):
            value_str = json.dumps(value, default=str, separators=(',', ':'))
            if len(value_str) > 100:
                value_str = value_str[:100] + "..."
            return value_str
        return str(value)

    def format_message(self, level: LogLevel, message: str, context: Optional[str] = None, **kwargs) -> str:
        """Format: [TIMESTAMP] [SERVICE/CONTEXT] [LEVEL] Message | key=value"""
        service_context = self.service_name
        if context:
            service_context += f"/{context.upper()}"

        timestamp_text = self._colorize(f"[{self._get_timestamp()}]", Colors.DIM)
        service_text = self._colorize(f"[{service_context}]", Colors.BRIGHT_BLACK)
        level_text = self._colorize(
            f"[{level.value}]", self.level_colors.get(level, Colors.WHITE) + Colors.BOLD
        )
        formatted = f"{timestamp_text} {service_text} {level_text} {message}"

        if kwargs:
            extras = ", ".join(f"{key}={self._format_value(value)}" for key, value in kwargs.items())
            formatted += self._colorize(f" | {extras}", Colors.DIM)
        return formatted

    def _log(self, level: LogLevel, message: str, context: Optional[str] = None, **kwargs):
        if not self._enabled(level):
            return
        stream = sys.stderr if level is LogLevel.ERROR else sys.stdout
        print(self.format_message(level, message, context, **kwargs), file=stream)
        stream.flush()

    def debug(self, message: str, context: Optional[str] = None, **kwargs):
        self._log(LogLevel.DEBUG, message, context, **kwargs)

    def info(self, message: str, context: Optional[str] = None, **kwargs):
        self._log(LogLevel.INFO, message, context, **kwargs)

    def warning(self, message: str, context: Optional[str] = None, **kwargs):
        self._log(LogLevel.WARNING, message, context, **kwargs)

    def error(self, message: str, context: Optional[str] = None, **kwargs):
        self._log(LogLevel.ERROR, message, context, **kwargs)

    def success(self, message: str, context: Optional[str] = None, **kwargs):
        self._log(LogLevel.SUCCESS, message, context, **kwargs)


# Global logger instances for different services
auth_logger = FitCoachLogger("AUTH")
student_logger = FitCoachLogger("STUDENTS")
session_logger = FitCoachLogger("SESSIONS")
diet_logger = FitCoachLogger("DIET")
workout_logger = FitCoachLogger("WORKOUTS")
payment_logger = FitCoachLogger("PAYMENTS")
admin_logger = FitCoachLogger("ADMIN")
storage_logger = FitCoachLogger("LOCAL_STORAGE")


def get_logger(service_name: str) -> FitCoachLogger:
    """Get a logger instance for a specific service"""
    return FitCoachLogger(service_name)
