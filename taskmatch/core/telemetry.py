import os
from fastapi import FastAPI
from opentelemetry import trace, metrics
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.instrumentation.psycopg2 import Psycopg2Instrumentor
from sqlalchemy.engine import Engine
from loguru import logger

from taskmatch.core.config import get_settings

# Instruments created from the global proxy meter start recording once a real
# meter provider is installed by setup_telemetry, and are no-ops before that.
meter = metrics.get_meter("taskmatch.tasks")
task_commands = meter.create_counter(
    "taskmatch.task.commands",
    unit="1",
    description="Committed task lifecycle commands, by command name",
)
task_conflicts = meter.create_counter(
    "taskmatch.task.conflicts",
    unit="1",
    description="Task commands refused because of the task's current state, by error code",
)


def record_command(command: str) -> None:
    task_commands.add(1, {"command": command})


def record_conflict(code: str) -> None:
    task_conflicts.add(1, {"code": code})


def setup_telemetry(app: FastAPI, engine: Engine | None = None):
    """
    Initialize OpenTelemetry tracing and metrics when an OTLP endpoint is configured.

    Exports spans and the task command counters over OTLP gRPC, and instruments the
    FastAPI app and the database layer (the given SQLAlchemy engine, plus psycopg2)
    once per process. Without OTEL_EXPORTER_OTLP_ENDPOINT telemetry stays disabled.
    Setup failures are logged, never raised.

    Parameters:
        app (FastAPI): FastAPI application to instrument (excludes /health).
        engine (Engine | None): Engine whose queries get spans; all engines when None.
    """
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if not endpoint:
        logger.warning("No OTLP endpoint configured, telemetry disabled.")
        return
    try:
        resource = Resource.create(
            {
                "service.name": os.getenv("OTEL_SERVICE_NAME", "taskmatch-api"),
                "deployment.environment": get_settings().ENVIRONMENT,
            }
        )
        insecure = os.getenv("OTEL_EXPORTER_OTLP_INSECURE", "false").lower() == "true"

        tracer_provider = TracerProvider(resource=resource)
        tracer_provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=insecure))
        )
        trace.set_tracer_provider(tracer_provider)

        metrics.set_meter_provider(
            MeterProvider(
                resource=resource,
                metric_readers=[
                    PeriodicExportingMetricReader(
                        OTLPMetricExporter(endpoint=endpoint, insecure=insecure)
                    )
                ],
            )
        )

        if not getattr(setup_telemetry, "_instrumented", False):
            FastAPIInstrumentor.instrument_app(app, excluded_urls="/health")
            if engine is not None:
                SQLAlchemyInstrumentor().instrument(  # type: ignore
                    engine=engine, enable_commenter=True
                )
            else:
                SQLAlchemyInstrumentor().instrument(enable_commenter=True)  # type: ignore
            Psycopg2Instrumentor().instrument(  # type: ignore
                enable_commenter=True, skip_dep_check=True
            )
            setup_telemetry._instrumented = True  # type: ignore

        logger.info(f"Traces and metrics exported to {endpoint}")

    except Exception as e:
        logger.error(f"Telemetry setup failed: {e}")
