import logging, os, random, re, uuid
from typing import Optional
import structlog

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
SAMPLE_RATE = float(os.getenv('SAMPLE_RATE', '1.0'))
REQUEST_ID_HEADER = 'X-Request-ID'
_REQUEST_ID_RE = re.compile(r'[A-Za-z0-9-]{8,64}')

def setup_logging():
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt='iso'),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, LOG_LEVEL, logging.INFO)),
    )
    return structlog.get_logger()

log = setup_logging()

def request_id(incoming: Optional[str] = None) -> str:
    """Reuse a well-formed id sent by the caller, otherwise mint one."""
    if incoming and _REQUEST_ID_RE.fullmatch(incoming):
        return incoming
    return uuid.uuid4().hex

def should_sample(rate: Optional[float] = None) -> bool:
    rate = SAMPLE_RATE if rate is None else rate
    return rate >= 1.0 or random.random() < rate
