"""Registry mapping configuration discriminators to generator classes."""

from typing import Callable, Optional, Type

from pgschemagen.config import GeneratorConfig
from pgschemagen.exceptions import ConfigError
from pgschemagen.generators.base import Generator
from pgschemagen.generators.fakedata import FakeDataGenerator
from pgschemagen.generators.hibernate import HibernateGenerator
from pgschemagen.generators.protobuf import ProtoBufGenerator
from pgschemagen.generators.sphinx import SphinxGenerator
from pgschemagen.observer import GenerationObserver
from pgschemagen.render import JinjaRenderer, Renderer, default_template_dir

__all__ = ["GeneratorRegistry", "default_registry", "create_generators"]

RendererFactory = Callable[[GeneratorConfig], Renderer]


def jinja_renderer_for(config: GeneratorConfig) -> Renderer:
    """Renderer for the configured template dir, or the bundled defaults."""
    return JinjaRenderer(config.templates or default_template_dir(config.type))


class GeneratorRegistry:
    """Registry of available generator classes keyed by type name."""

    def __init__(self) -> None:
        self._generators: dict[str, Type[Generator]] = {}

    def register(self, generator_class: Type[Generator], replace: bool = False) -> None:
        """Register a generator class under its TYPE_NAME.

        Raises:
            ConfigError: If the name is taken and replace is False.
        """
        key = generator_class.TYPE_NAME.lower()
        if key in self._generators and not replace:
            raise ConfigError(f"Generator '{key}' is already registered")
        self._generators[key] = generator_class

    def get_generator_class(self, type_name: str) -> Type[Generator]:
        """Look up a generator class.

        Raises:
            ConfigError: If no generator is registered under type_name.
        """
        try:
            return self._generators[type_name.lower()]
        except KeyError:
            raise ConfigError(
                f"unknown generator: {type_name}. "
                f"Available: {', '.join(self.list_types())}"
            ) from None

    def list_types(self) -> list[str]:
        return sorted(self._generators)

    def create(
        self,
        config: GeneratorConfig,
        renderer: Optional[Renderer] = None,
        observer: Optional[GenerationObserver] = None,
    ) -> Generator:
        generator_class = self.get_generator_class(config.type)
        return generator_class(
            config,
            renderer if renderer is not None else jinja_renderer_for(config),
            observer,
        )


def default_registry() -> GeneratorRegistry:
    registry = GeneratorRegistry()
    for generator_class in (
        HibernateGenerator,
        ProtoBufGenerator,
        SphinxGenerator,
        FakeDataGenerator,
    ):
        registry.register(generator_class)
    return registry


def create_generators(
    configs: list[GeneratorConfig],
    registry: Optional[GeneratorRegistry] = None,
    observer: Optional[GenerationObserver] = None,
    renderer_factory: RendererFactory = jinja_renderer_for,
) -> list[Generator]:
    """Resolve every configured generator up front, in configuration order.

    Raises:
        ConfigError: On the first unknown generator type.
    """
    registry = registry or default_registry()
    for config in configs:
        registry.get_generator_class(config.type)
    return [
        registry.create(config, renderer_factory(config), observer)
        for config in configs
    ]
