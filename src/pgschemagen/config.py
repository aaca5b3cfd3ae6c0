"""Configuration management for pgschemagen."""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from pgschemagen.exceptions import ConfigError, ValidationError
from pgschemagen.types import MatchPolicy, NumericRepresentation

__all__ = [
    "GeneratorConfig",
    "Config",
    "load_config",
    "parse_config",
    "find_config_file",
    "validate_output_dirs",
]

VALID_CONFIG_FIELDS = {
    "src",
    "namespace",
    "statement_timeout",
    "generators",
}

VALID_GENERATOR_FIELDS = {
    "type",
    "output",
    "templates",
    "package_name",
    "java_package",
    "go_package",
    "enum_dir",
    "ignore_tables",
    "ignore_columns",
    "ignore_match",
    "not_insertable_columns",
    "not_updatable_columns",
    "version_field_column",
    "numeric_representation",
    "use_string_to_numeric",
    "generate_metamodel",
}

CONFIG_SUFFIXES = (".json", ".yaml", ".yml")


@dataclass
class GeneratorConfig:
    """Configuration for one backend generator."""

    type: str
    output: Path
    templates: Optional[Path] = None
    package_name: str = ""
    java_package: str = ""
    go_package: str = ""
    enum_dir: str = ""
    ignore_tables: list[str] = field(default_factory=list)
    ignore_columns: list[str] = field(default_factory=list)
    ignore_match: MatchPolicy = MatchPolicy.CONTAINS
    not_insertable_columns: list[str] = field(default_factory=list)
    not_updatable_columns: list[str] = field(default_factory=list)
    version_field_column: Optional[str] = None
    numeric_representation: NumericRepresentation = NumericRepresentation.INTEGER
    generate_metamodel: bool = False


@dataclass
class Config:
    """Configuration for pgschemagen."""

    src: Optional[str] = None
    namespace: str = "public"
    statement_timeout: Optional[float] = None
    generators: list[GeneratorConfig] = field(default_factory=list)
    root: Path = field(default_factory=Path.cwd)

    def validate_for_db_ops(self) -> None:
        """Validate that a connection string is present.

        Raises:
            ConfigError: If src is missing.
        """
        if not self.src:
            raise ConfigError(
                "Missing required configuration:\n"
                "  - src (use --src, PGSCHEMAGEN_SRC or 'src' in the config file)"
            )


def _resolve_path(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    if path.is_absolute():
        return path
    return root / path


def _string_list(data: dict, key: str, index: int) -> list[str]:
    value = data.get(key) or []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"generators[{index}].{key} must be a list of strings")
    return list(value)


def _optional_str(data: dict, key: str, index: int) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"generators[{index}].{key} must be a string")
    return value


def _bool(data: dict, key: str, index: int) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise ConfigError(
            f"generators[{index}].{key} must be true or false, got {value!r}"
        )
    return value


def _parse_generator(data: Any, root: Path, index: int) -> GeneratorConfig:
    """Parse one generator entry from a dictionary."""
    if not isinstance(data, dict):
        raise ConfigError(f"generators[{index}] must be a mapping")

    unknown_fields = set(data.keys()) - VALID_GENERATOR_FIELDS
    if unknown_fields:
        raise ConfigError(
            f"Unknown field(s) in generators[{index}]: {', '.join(sorted(unknown_fields))}"
        )

    gen_type = data.get("type")
    if not gen_type or not isinstance(gen_type, str):
        raise ConfigError(f"generators[{index}] missing 'type' field")

    output = data.get("output")
    if not output:
        raise ConfigError(f"generators[{index}] ({gen_type}) missing 'output' field")

    templates = data.get("templates")

    try:
        ignore_match = MatchPolicy(data.get("ignore_match", MatchPolicy.CONTAINS.value))
    except ValueError:
        raise ConfigError(
            f"generators[{index}].ignore_match must be one of "
            f"{', '.join(p.value for p in MatchPolicy)}"
        ) from None

    numeric = data.get("numeric_representation")
    if numeric is None:
        numeric = (
            NumericRepresentation.STRING.value
            if _bool(data, "use_string_to_numeric", index)
            else NumericRepresentation.INTEGER.value
        )
    try:
        numeric_representation = NumericRepresentation(numeric)
    except ValueError:
        raise ConfigError(
            f"generators[{index}].numeric_representation must be one of "
            f"{', '.join(n.value for n in NumericRepresentation)}"
        ) from None

    return GeneratorConfig(
        type=gen_type,
        output=_resolve_path(root, str(output)),
        templates=_resolve_path(root, str(templates)) if templates else None,
        package_name=_optional_str(data, "package_name", index) or "",
        java_package=_optional_str(data, "java_package", index) or "",
        go_package=_optional_str(data, "go_package", index) or "",
        enum_dir=_optional_str(data, "enum_dir", index) or "",
        ignore_tables=_string_list(data, "ignore_tables", index),
        ignore_columns=_string_list(data, "ignore_columns", index),
        ignore_match=ignore_match,
        not_insertable_columns=_string_list(data, "not_insertable_columns", index),
        not_updatable_columns=_string_list(data, "not_updatable_columns", index),
        version_field_column=_optional_str(data, "version_field_column", index)
        or None,
        numeric_representation=numeric_representation,
        generate_metamodel=_bool(data, "generate_metamodel", index),
    )


def _parse_timeout(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"statement_timeout must be a number, got {value!r}") from None
    if timeout <= 0:
        raise ConfigError(f"statement_timeout must be positive, got {value!r}")
    return timeout


def parse_config(
    data: Any,
    root: Path,
    *,
    src: Optional[str] = None,
    namespace: Optional[str] = None,
    statement_timeout: Optional[float] = None,
) -> Config:
    """Build a Config from parsed file data.

    Priority (highest to lowest):
    1. Explicit parameters (CLI args)
    2. Environment variables
    3. Config file values
    """
    if not isinstance(data, dict):
        raise ConfigError("Config must be a mapping with a 'generators' list")

    unknown_fields = set(data.keys()) - VALID_CONFIG_FIELDS
    if unknown_fields:
        raise ConfigError(
            f"Unknown field(s) in config: {', '.join(sorted(unknown_fields))}"
        )

    def resolve(explicit, env_key, file_key):
        if explicit is not None:
            return explicit
        env_val = os.environ.get(env_key)
        if env_val is not None:
            return env_val
        return data.get(file_key)

    raw_generators = data.get("generators")
    if not isinstance(raw_generators, list) or not raw_generators:
        raise ConfigError("Config must define a non-empty 'generators' list")

    generators = [
        _parse_generator(entry, root, i) for i, entry in enumerate(raw_generators)
    ]

    return Config(
        src=resolve(src, "PGSCHEMAGEN_SRC", "src"),
        namespace=resolve(namespace, "PGSCHEMAGEN_NAMESPACE", "namespace") or "public",
        statement_timeout=_parse_timeout(
            resolve(statement_timeout, "PGSCHEMAGEN_STATEMENT_TIMEOUT", "statement_timeout")
        ),
        generators=generators,
        root=root,
    )


def load_config(
    path: Path,
    *,
    src: Optional[str] = None,
    namespace: Optional[str] = None,
    statement_timeout: Optional[float] = None,
) -> Config:
    """Load configuration from a JSON or YAML file.

    Relative output and template paths resolve against the file's directory.

    Raises:
        ConfigError: If the file is missing, unparsable or invalid.
    """
    if not path.is_file():
        raise ConfigError(f"Config file does not exist: {path}")
    try:
        with open(path) as f:
            if path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot parse config file {path}: {e}") from e

    if data is None:
        raise ConfigError(f"Empty config file: {path}")

    return parse_config(
        data,
        path.resolve().parent,
        src=src,
        namespace=namespace,
        statement_timeout=statement_timeout,
    )


def find_config_file(directory: Path) -> Path:
    """Find a config file in directory.

    A candidate is a .json/.yaml/.yml file mentioning both 'generators'
    and 'output'. 'templates' is optional, so it plays no part.

    Raises:
        ConfigError: If no matching file exists.
    """
    candidates = sorted(
        p for p in directory.glob("*") if p.is_file() and p.suffix in CONFIG_SUFFIXES
    )
    for candidate in candidates:
        text = candidate.read_text(errors="replace")
        if "generators" in text and "output" in text:
            return candidate
    raise ConfigError(f"No matching config file in {directory}")


def validate_output_dirs(config: Config) -> None:
    """Check that every generator's output directory exists.

    Raises:
        ValidationError: If an output path is missing or not a directory.
    """
    for gen in config.generators:
        if not gen.output.exists():
            raise ValidationError(
                f"{gen.type}: output dir {gen.output} does not exist"
            )
        if not gen.output.is_dir():
            raise ValidationError(
                f"{gen.type}: output dir {gen.output} is not a directory"
            )
