"""
Structured logging for the draft bot

Console output stays human-readable; the rotating file log is one JSON object
per line so a draft can be reconstructed later by league, game or trace_id.
"""
import contextvars
import json
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

# Per-task context (league, game, user, trace) attached to every JSON entry
log_context: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar('log_context', default={})

# Context keys copied to the top level of each JSON entry for easy filtering
PROMOTED_KEYS = ('trace_id', 'league_id', 'game_id')

# Attributes every LogRecord carries; anything else came in through extra=
_RESERVED_RECORD_KEYS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'getMessage', 'exc_info',
    'exc_text', 'stack_info', 'taskName'
}


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON for the file handler."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'function': record.funcName,
            'line': record.lineno,
        }

        context = log_context.get({})
        if context:
            entry['context'] = dict(context)
            for key in PROMOTED_KEYS:
                if key in context:
                    entry[key] = context[key]

        if record.exc_info:
            entry['exception'] = self._exception_block(record)

        extra = self._extra_block(record)
        if extra:
            entry['extra'] = extra

        return json.dumps(entry, ensure_ascii=False, default=str) + '\n'

    def _exception_block(self, record: logging.LogRecord) -> Dict[str, str]:
        exc_type, exc_value, _ = record.exc_info
        return {
            'type': exc_type.__name__ if exc_type else 'Unknown',
            'message': str(exc_value) if exc_value else '',
            'traceback': self.formatException(record.exc_info),
        }

    @staticmethod
    def _extra_block(record: logging.LogRecord) -> Dict[str, Any]:
        extra = {}
        for key, value in vars(record).items():
            if key in _RESERVED_RECORD_KEYS:
                continue
            try:
                json.dumps(value)
            except (TypeError, ValueError):
                value = str(value)
            extra[key] = value
        return extra


class ContextualLogger:
    """
    Wrapper around a stdlib logger that adds operation timing.

    Keyword arguments given to the log methods land in the JSON entry's
    'extra' block. While an operation is running every entry also carries
    duration_ms since start_operation.
    """

    def __init__(self, logger_name: str):
        self.logger = logging.getLogger(logger_name)
        self._start_time: Optional[float] = None

    def start_operation(self, operation_name: Optional[str] = None) -> str:
        """
        Begin a timed operation.

        Returns:
            8-character trace ID, also stored in the log context
        """
        self._start_time = time.time()
        trace_id = uuid.uuid4().hex[:8]

        fields: Dict[str, Any] = {'trace_id': trace_id}
        if operation_name:
            fields['operation'] = operation_name
        _update_context(**fields)

        return trace_id

    def end_operation(self, trace_id: str, operation_result: str = "completed") -> None:
        """Log the total duration of the running operation and drop its trace ID."""
        if self._start_time is None:
            self.warning("end_operation called without corresponding start_operation")
            return

        elapsed = self._elapsed_ms()
        self.info(f"Operation {operation_result}",
                  final_duration_ms=elapsed,
                  operation_result=operation_result)

        context = dict(log_context.get({}))
        context.pop('operation', None)
        if context.get('trace_id') == trace_id:
            del context['trace_id']
        log_context.set(context)

        self._start_time = None

    def _elapsed_ms(self) -> int:
        return int((time.time() - self._start_time) * 1000)

    def _log(self, level: str, message: str, fields: Dict[str, Any], **log_kwargs) -> None:
        if self._start_time:
            fields['duration_ms'] = self._elapsed_ms()
        getattr(self.logger, level)(message, extra=fields, **log_kwargs)

    def debug(self, message: str, **kwargs):
        self._log('debug', message, kwargs)

    def info(self, message: str, **kwargs):
        self._log('info', message, kwargs)

    def warning(self, message: str, **kwargs):
        self._log('warning', message, kwargs)

    def error(self, message: str, error: Optional[Exception] = None, **kwargs):
        """
        Log an error, with traceback when the exception is passed in.

        Args:
            message: Error message
            error: Exception being reported (adds type/message and exc_info)
            **kwargs: Additional fields
        """
        if error is None:
            self._log('error', message, kwargs)
            return

        kwargs['error'] = {'type': type(error).__name__, 'message': str(error)}
        self._log('error', message, kwargs, exc_info=True)

    def exception(self, message: str, **kwargs):
        self._log('exception', message, kwargs)


def _update_context(**fields) -> None:
    context = dict(log_context.get({}))
    context.update(fields)
    log_context.set(context)


def set_draft_context(
    interaction: Optional[Any] = None,
    user_id: Optional[Union[str, int]] = None,
    league_id: Optional[str] = None,
    game_id: Optional[str] = None,
    command: Optional[str] = None,
    **additional_context
):
    """
    Attach draft details to every log entry written by the current task.

    The interaction supplies user, guild and command; explicit arguments win
    over what the interaction says.
    """
    fields: Dict[str, Any] = {}

    if interaction:
        fields['user_id'] = str(interaction.user.id)
        if interaction.guild:
            fields['guild_id'] = str(interaction.guild.id)
        if getattr(interaction, 'command', None):
            fields['command'] = f"/{interaction.command.name}"

    explicit = {'user_id': user_id, 'league_id': league_id, 'game_id': game_id}
    fields.update({key: str(value) for key, value in explicit.items() if value})
    if command:
        fields['command'] = command

    fields.update(additional_context)
    _update_context(**fields)


def clear_context():
    log_context.set({})


def get_contextual_logger(logger_name: str) -> ContextualLogger:
    """Get a ContextualLogger for logger_name (typically __name__)."""
    return ContextualLogger(logger_name)
