"""
OpenTelemetry tracing for patch application and predicate evaluation
"""

import logging
import os
from contextlib import contextmanager
from functools import wraps
from typing import Any, Dict, Optional

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode, SpanKind
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.sdk.resources import Resource

from . import __version__

logger = logging.getLogger(__name__)


class TracingConfig:
    """Configuration for OpenTelemetry tracing"""

    def __init__(
        self,
        service_name: Optional[str] = None,
        service_version: Optional[str] = None,
        environment: Optional[str] = None,
        sample_rate: Optional[float] = None,
        enabled: Optional[bool] = None,
    ):
        self.service_name = service_name or os.getenv("OTEL_SERVICE_NAME", "jsontools")
        self.service_version = service_version or os.getenv("OTEL_SERVICE_VERSION", __version__)
        self.environment = environment or os.getenv("OTEL_ENVIRONMENT", "development")
        self.sample_rate = float(sample_rate if sample_rate is not None else os.getenv("OTEL_SAMPLE_RATE", "1.0"))
        self.enabled = enabled if enabled is not None else os.getenv("OTEL_ENABLED", "true").lower() == "true"


class NoOpSpan:
    """No-op span for when tracing is disabled"""

    def set_attribute(self, key, value):
        pass

    def set_status(self, status):
        pass

    def record_exception(self, exception):
        pass

    def is_recording(self):
        return False

    def end(self):
        pass


class DistributedTracer:
    """
    Owns the tracer used by jsontools spans.

    By default spans go to whatever tracer provider is already global, so a
    host application's provider and exporters stay in place. Only
    ``install_provider=True`` (used by ``initialize_tracing``) replaces it.
    """

    def __init__(self, config: TracingConfig = None, install_provider: bool = False):
        self.config = config or TracingConfig()
        self._tracer = None
        self._initialized = False

        if self.config.enabled:
            if install_provider:
                self._initialize_tracing()
            else:
                self._tracer = trace.get_tracer(self.config.service_name, self.config.service_version)
                self._initialized = True

    def _initialize_tracing(self):
        """Install a jsontools tracer provider as the global provider"""
        try:
            resource = Resource.create({
                "service.name": self.config.service_name,
                "service.version": self.config.service_version,
                "deployment.environment": self.config.environment,
            })

            ratio = max(0.0, min(1.0, float(self.config.sample_rate)))
            sampler = ParentBased(TraceIdRatioBased(ratio))

            # Allow override so tests can reconfigure
            new_provider = TracerProvider(resource=resource, sampler=sampler)
            trace.set_tracer_provider(new_provider)
            tracer_provider = trace.get_tracer_provider()
            attrs = getattr(getattr(tracer_provider, "resource", None), "attributes", {}) or {}
            if attrs.get("service.name") != self.config.service_name:
                trace._TRACER_PROVIDER = new_provider  # type: ignore[attr-defined]
                tracer_provider = new_provider

            self._tracer = tracer_provider.get_tracer(self.config.service_name, self.config.service_version)
            self._initialized = True
            logger.info(f"OpenTelemetry tracing initialized for {self.config.service_name}")

        except Exception as e:
            logger.error(f"Failed to initialize OpenTelemetry tracing: {e}")
            self.config.enabled = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    @contextmanager
    def span(self, name: str, kind: SpanKind = SpanKind.INTERNAL, attributes: Dict[str, Any] = None):
        """Context manager for spans; the span is current for the duration of the block"""
        if not self._initialized:
            yield NoOpSpan()
            return
        with self._tracer.start_as_current_span(
            name, kind=kind, attributes=attributes or {}, record_exception=False, set_status_on_exception=False
        ) as span:
            try:
                yield span
                span.set_status(Status(StatusCode.OK))
            except Exception as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                span.record_exception(e)
                raise


# Global tracer instance
_tracer = None


def get_tracer() -> DistributedTracer:
    """Get global tracer instance"""
    global _tracer
    if _tracer is None:
        _tracer = DistributedTracer()
    return _tracer


def initialize_tracing(config: TracingConfig = None) -> DistributedTracer:
    """Install a jsontools tracer provider and use it for all jsontools spans"""
    global _tracer
    _tracer = DistributedTracer(config, install_provider=True)
    return _tracer


def trace_span(name: str = None, kind: SpanKind = SpanKind.INTERNAL):
    """Decorator for tracing functions"""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            span_name = name or f"{func.__module__}.{func.__name__}"
            with get_tracer().span(span_name, kind) as span:
                span.set_attribute("function.name", func.__name__)
                return func(*args, **kwargs)

        return wrapper
    return decorator

