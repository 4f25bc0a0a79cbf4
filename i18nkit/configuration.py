"""Prepper-backed configuration loader for i18nkit."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Sequence

from dotenv import dotenv_values
from prepper import (
    Field,
    IoError,
    SchemaError,
    SchemaModel,
    ValidationError,
    model_validator,
)
from prepper.config import ConfigInstance
from prepper.loaders import _parse_file, _path_to_source, discover_file_paths
from prepper.merge import merge_layer
from prepper.provenance import ProvenanceRecorder

from .errors import InvalidConfigurationError
from .store import DEFAULT_TABLE

APP_NAME = "i18nkit"
ENV_PREFIX = "I18N_"


class I18nKitConfig(SchemaModel):
    """Schema describing all supported configuration options."""

    I18N_LANGUAGES: Any = Field(
        default=None,
        description="Target locales: comma separated, a list, or a mapping.",
    )
    I18N_DATABASE: str = Field(
        default="i18n.sqlite3",
        description="SQLite database holding the message table.",
    )
    I18N_TABLE: str = Field(default=DEFAULT_TABLE)
    I18N_CORE_PATH: str | None = Field(
        default=None,
        description="Framework core path whose marker errors are not counted.",
    )
    I18N_MARKER_ERROR: bool = Field(default=False)

    @model_validator(mode="before")
    def _normalise_languages(data: Any) -> Any:
        if isinstance(data, dict):
            raw_value = data.get("I18N_LANGUAGES")
            if isinstance(raw_value, str):
                data["I18N_LANGUAGES"] = raw_value.strip() or None
        return data


SECTION_KEY = "i18n"


def flatten_section(parsed: Mapping[str, Any], path: Path) -> dict[str, Any]:
    """Map an ``i18n:`` section onto I18N_* keys, keeping top-level I18N_* keys.

    ``i18n: {languages: [en, fr]}`` becomes ``{"I18N_LANGUAGES": ["en", "fr"]}``.
    Any other top-level key is rejected.
    """

    flat: dict[str, Any] = {}
    for key, value in parsed.items():
        if key == SECTION_KEY:
            if not isinstance(value, Mapping):
                raise IoError(
                    f"Invalid configuration file {path}: '{SECTION_KEY}' must be a mapping."
                )
            flat.update({ENV_PREFIX + str(name).upper(): item for name, item in value.items()})
        elif str(key).startswith(ENV_PREFIX):
            flat[str(key)] = value
        else:
            raise IoError(f"Invalid configuration file {path}: unknown key '{key}'.")
    return flat


@lru_cache(maxsize=1)
def _load_config_instance(app_dir: Path | None = None) -> ConfigInstance:
    """Validate the merged file and env layers once; no source at all means defaults."""

    base_dir = app_dir or Path.cwd()
    provenance = ProvenanceRecorder()
    try:
        combined = _load_discovered_yaml(app_dir=base_dir, provenance=provenance)
        _merge_env_sources(
            combined,
            provenance=provenance,
            app_dir=base_dir,
            schema=I18nKitConfig,
        )
        model = I18nKitConfig.validate(combined, provenance=provenance)
    except IoError as exc:
        raise InvalidConfigurationError(f"Configuration files could not be read: {exc}") from exc
    except SchemaError as exc:
        raise InvalidConfigurationError(f"Configuration schema error: {exc}") from exc
    except ValidationError as exc:
        raise InvalidConfigurationError(_format_validation_errors(exc.to_dict())) from exc
    return ConfigInstance(
        model=model,
        provenance=provenance,
        env_prefix=None,
        schema_cls=I18nKitConfig,
    )


def _load_discovered_yaml(
    *,
    app_dir: Path,
    provenance: ProvenanceRecorder,
) -> dict[str, Any]:
    """Merge every discovered i18nkit YAML file, later files winning."""

    result: dict[str, Any] = {}
    for path, label in discover_file_paths(APP_NAME, "yaml", app_dir=app_dir, extra_paths=None):
        parsed = _parse_file(path, "yaml")
        if parsed is None:
            continue
        if not isinstance(parsed, Mapping):
            raise IoError(f"Invalid configuration file {path}: expected a mapping at the root.")
        merge_layer(
            result,
            flatten_section(parsed, path),
            provenance=provenance,
            source=_path_to_source(label, "yaml", path),
            layer="file",
        )
    return result


def _env_layers(app_dir: Path) -> list[tuple[str, Mapping[str, str | None]]]:
    """The .env file of the application directory, then the process environment."""

    layers: list[tuple[str, Mapping[str, str | None]]] = []
    dotenv_path = app_dir / ".env"
    if dotenv_path.exists():
        layers.append((".env", dotenv_values(dotenv_path)))
    layers.append(("process", dict(os.environ)))
    return layers


def _merge_env_sources(
    target: dict[str, Any],
    *,
    provenance: ProvenanceRecorder,
    app_dir: Path,
    schema: type[SchemaModel],
) -> None:
    """Merge I18N_* variables from every env layer into the target mapping."""

    allowed = {key for key in schema.__field_infos__ if key.startswith(ENV_PREFIX)}
    for source_prefix, values in _env_layers(app_dir):
        picked = {
            key: value
            for key, value in values.items()
            if key in allowed and isinstance(value, str)
        }
        for key in sorted(picked):
            merge_layer(
                target,
                {key: picked[key]},
                provenance=provenance,
                source=f"env:{source_prefix}:{key}",
                layer="env",
            )


def _describe_issue(entry: Mapping[str, Any]) -> str:
    path = entry.get("path") or []
    if isinstance(path, (list, tuple)):
        location = ".".join(str(part) for part in path if part not in {None, ""})
    else:
        location = str(path)
    message = str(entry.get("message") or entry.get("msg") or "Invalid value")
    source = entry.get("source")
    text = f"{location}: {message}" if location else message
    return f"{text} (source: {source})" if source else text


def _format_validation_errors(entries: Sequence[Mapping[str, Any]]) -> str:
    bullet_list = "\n".join(f"- {_describe_issue(entry)}" for entry in entries)
    return "Invalid i18nkit configuration:\n" + bullet_list


def get_config(app_dir: Path | None = None) -> ConfigInstance:
    """Return the immutable configuration instance."""

    return _load_config_instance(app_dir=app_dir)


def get_settings(app_dir: Path | None = None) -> I18nKitConfig:
    """Return the validated schema model for typed access."""

    return get_config(app_dir=app_dir).model()
