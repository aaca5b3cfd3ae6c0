"""Generation run: inspect the schema once, then build each generator in order."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from pgschemagen.config import Config, validate_output_dirs
from pgschemagen.deadline import Deadline
from pgschemagen.generators.registry import (
    GeneratorRegistry,
    RendererFactory,
    create_generators,
    jinja_renderer_for,
)
from pgschemagen.observer import GenerationObserver, LoggingObserver
from pgschemagen.postgres.client import PostgresClient
from pgschemagen.schema.introspect import SQLClient, inspect_schema
from pgschemagen.schema.models import SchemaModel
from pgschemagen.sink import ArtifactSink, DirectorySink

__all__ = ["run", "generate"]

logger = logging.getLogger(__name__)

SinkFactory = Callable[[Path], ArtifactSink]


def run(
    config: Config,
    client: SQLClient,
    *,
    observer: Optional[GenerationObserver] = None,
    deadline: Optional[Deadline] = None,
    registry: Optional[GeneratorRegistry] = None,
    renderer_factory: RendererFactory = jinja_renderer_for,
    sink_factory: SinkFactory = DirectorySink,
) -> SchemaModel:
    """Run every configured generator against one inspection of the schema.

    The first error aborts the run. Artifacts already written by earlier
    generators, or by earlier tables of the failing one, stay on disk.

    Returns:
        The inspected schema model.

    Raises:
        ValidationError: If an output directory is missing.
        ConfigError: If a generator type is unknown.
        QueryError: If introspection fails.
        BuildError: If a generator fails to render or write.
    """
    observer = observer or LoggingObserver()

    validate_output_dirs(config)
    generators = create_generators(
        config.generators,
        registry=registry,
        observer=observer,
        renderer_factory=renderer_factory,
    )

    model = inspect_schema(client, config.namespace, deadline)

    for gen, gen_config in zip(generators, config.generators):
        observer.generator_started(gen.kind(), gen_config.output, gen_config.templates)
        gen.build(model, sink_factory(gen_config.output))
        observer.generator_finished(gen.kind())

    return model


def generate(
    config: Config,
    *,
    observer: Optional[GenerationObserver] = None,
    deadline: Optional[Deadline] = None,
) -> SchemaModel:
    """Connect with config.src and run.

    Raises:
        ConfigError: If src is missing.
        DatabaseConnectionError: If the connection cannot be opened.
    """
    config.validate_for_db_ops()
    validate_output_dirs(config)
    if deadline is None:
        deadline = Deadline(config.statement_timeout)

    with PostgresClient(config.src, connect_timeout=deadline.remaining()) as client:
        logger.debug(f"Inspecting namespace {config.namespace}")
        return run(config, client, observer=observer, deadline=deadline)
