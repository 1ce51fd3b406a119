import sys
from typing import Any

from kink import di
from loguru import logger
from opentelemetry.trace import get_current_span

from client_identity.core.config import Configuration
from client_identity.core.paths import ROOT_PATH
from client_identity.domain.common.utils import DataSanitizer


def _inject_trace_context(record: dict[str, Any]) -> None:
    """Populate ``trace_id`` / ``span_id`` in ``record['extra']`` if absent."""
    span_ctx = get_current_span().get_span_context()

    if span_ctx and span_ctx.trace_id:
        record.setdefault('extra', {})
        record['extra'].setdefault('trace_id', f'{span_ctx.trace_id:032x}')
        record['extra'].setdefault('span_id', f'{span_ctx.span_id:016x}')


def format_log_record(record: dict[str, Any]) -> str:
    """Custom formatter for loguru records with sensitive data sanitization."""
    record['message'] = DataSanitizer.sanitize(record['message'])
    _inject_trace_context(record)
    extra = record.get('extra', {})

    fmt = (
        '<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | '
        '<level>{level: <8}</level> | '
        '<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan>'
    )

    if 'trace_id' in extra:
        fmt += ' | <blue>{extra[trace_id]}</blue>/<yellow>{extra[span_id]}</yellow>'

    if 'event' in extra:
        fmt += ' | <yellow>[{extra[event]:<6}]</yellow>'

    fmt += ' | <level>{message}</level>'

    details = {
        key: value
        for key, value in extra.items()
        if key not in {'event', 'name', 'trace_id', 'span_id'}
    }
    if details:
        record['extra']['details'] = DataSanitizer.sanitize(details)
        fmt += '\n<white>{extra[details]}</white>'

    if record.get('exception'):
        fmt += '\n{exception}'

    return fmt + '\n'


# noinspection PyTypeChecker
def setup_logging() -> None:
    """Setup Loguru logging with configuration."""
    config = di[Configuration]
    log_config = config.log

    logger.remove()

    # geo tracing is emitted at DEBUG and must reach the console when enabled
    console_level = 'DEBUG' if config.geo.debug else log_config.level
    if config.app_debug and config.app_environment == 'local':
        console_level = 'DEBUG'

    logger.add(
        sys.stderr,
        level=console_level,
        format=format_log_record,  # type: ignore [arg-type]
        colorize=config.app_debug,
        backtrace=config.app_debug,
        diagnose=config.app_debug,
        enqueue=True,
    )

    if log_config.to_file:
        log_file_path = ROOT_PATH / log_config.file_path
        log_file_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_file_path,
            level=log_config.level,
            format=format_log_record,  # type: ignore [arg-type]
            rotation='100 MB',
            retention='30 days',
            compression='gz',
            enqueue=True,
        )

        logger.add(
            log_file_path.with_name('error.log'),
            level='ERROR',
            format=format_log_record,  # type: ignore [arg-type]
            rotation='100 MB',
            retention='30 days',
            compression='gz',
            enqueue=True,
        )


def get_logger(name: str | None = None) -> Any:
    """Get a Loguru logger instance."""
    return logger.bind(name=name) if name else logger


class DebugTrace:
    """Diagnostic side-channel for the resolution pipeline.

    Messages are only emitted when geo debugging is enabled. Callers never
    branch on the trace, so enabling it cannot change a resolution result.
    """

    def __init__(self, event: str, enabled: bool) -> None:
        self.enabled = enabled
        self._logger = logger.bind(event=event)

    def __call__(self, message: str, **details: Any) -> None:
        if self.enabled:
            self._logger.opt(depth=1).bind(**details).debug(message)
