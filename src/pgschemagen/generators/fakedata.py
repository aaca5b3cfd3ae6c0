"""Synthetic-data generator.

Registered so configurations naming it resolve, but it writes nothing yet.
"""

from pgschemagen.generators.base import Generator
from pgschemagen.generators.types import TypeMap
from pgschemagen.schema.models import SchemaModel
from pgschemagen.sink import ArtifactSink

__all__ = ["FakeDataGenerator"]


class FakeDataGenerator(Generator):
    TYPE_NAME = "fakedata"

    def type_map(self) -> TypeMap:
        return TypeMap([])

    def build(self, model: SchemaModel, sink: ArtifactSink) -> None:
        tables = self.tables(model)
        self.observer.warning(
            self.kind(),
            f"synthetic data generation is not implemented; "
            f"skipping {len(tables)} tables",
        )
