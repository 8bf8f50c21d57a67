import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
import logging
from app.core.config import settings
import time
from functools import wraps
from typing import Callable
import asyncio

# Configure structured logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler()
    ]
)

logger = logging.getLogger(__name__)

def init_sentry():
    """Initialize Sentry error tracking"""
    if settings.SENTRY_DSN:
        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                SqlalchemyIntegration(),
            ],
            traces_sample_rate=0.1 if settings.is_production else 1.0,
            environment=settings.ENVIRONMENT or "local",
            release=settings.GIT_COMMIT_SHA,
            attach_stacktrace=True,
            send_default_pii=False,  # visitor IPs and emails stay out of Sentry
        )
        logger.info("Sentry initialized successfully")

class MetricsCollector:
    def __init__(self):
        self.metrics = {}

    def _key(self, metric: str, tags: dict = None) -> str:
        if not tags:
            return metric
        rendered = ",".join(f"{k}={v}" for k, v in sorted(tags.items()))
        return f"{metric}:{rendered}"

    def increment(self, metric: str, value: int = 1, tags: dict = None):
        """Increment a counter metric"""
        key = self._key(metric, tags)
        self.metrics[key] = self.metrics.get(key, 0) + value

    def gauge(self, metric: str, value: float, tags: dict = None):
        """Set a gauge metric"""
        self.metrics[self._key(metric, tags)] = value

    def get(self, metric: str, tags: dict = None, default=0):
        return self.metrics.get(self._key(metric, tags), default)

    def reset(self):
        self.metrics.clear()

    def timing(self, metric: str):
        """Decorator for timing functions"""
        def decorator(func: Callable):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                start_time = time.time()
                try:
                    return await func(*args, **kwargs)
                finally:
                    duration = (time.time() - start_time) * 1000  # ms
                    self.gauge(f"{metric}.duration", duration)
                    logger.info(f"{metric} took {duration:.2f}ms")

            @wraps(func)
            def sync_wrapper(*args, **kwargs):
                start_time = time.time()
                try:
                    return func(*args, **kwargs)
                finally:
                    duration = (time.time() - start_time) * 1000  # ms
                    self.gauge(f"{metric}.duration", duration)
                    logger.info(f"{metric} took {duration:.2f}ms")

            return async_wrapper if asyncio.iscoroutinefunction(func) else sync_wrapper
        return decorator

metrics = MetricsCollector()
