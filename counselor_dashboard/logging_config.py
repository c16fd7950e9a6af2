import logging
import sys

import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder

from counselor_dashboard.config import JSON_LOGS, LOG_LEVEL


def configure_logging(level: str = LOG_LEVEL, json_logs: bool = JSON_LOGS) -> None:
    """
    Wire structlog and stdlib logging to the same stdout handler.

    - `json_logs` switches to JSONRenderer (deployments).
    - Otherwise a coloured ConsoleRenderer is used for local runs.
    Streamlit reruns the script on every interaction, so calling this
    more than once must stay harmless: the root handlers are replaced.
    """
    pre_chain = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    final_processor = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(colors=True)
    )

    structlog.configure(
        processors=[
            *pre_chain,
            CallsiteParameterAdder(
                parameters=[
                    CallsiteParameter.MODULE,
                    CallsiteParameter.FUNC_NAME,
                    CallsiteParameter.LINENO,
                ]
            ),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=final_processor,
        foreign_pre_chain=pre_chain,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    logging.captureWarnings(True)
