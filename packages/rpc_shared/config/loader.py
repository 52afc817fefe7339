"""Settings loading with deterministic precedence.

The cascade is always:
1) CLI params
2) Environment variables
3) ``~/.config/rpc_errors/rpc_errors.yaml``
4) Model defaults

Environment variable format:
- Prefix: ``RPC_ERRORS_``
- Nested keys: ``__`` separator
- Example: ``RPC_ERRORS_STATUS__DOMAIN=billing`` -> ``status.domain = "billing"``
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Mapping

from pydantic_settings import BaseSettings, EnvSettingsSource, YamlConfigSettingsSource

from .models import DEFAULT_CONFIG_PATH, RpcErrorsSettings


class MappingEnvSettingsSource(EnvSettingsSource):
    """Environment source reading an explicit mapping instead of ``os.environ``."""

    def __init__(self, settings_cls: type[BaseSettings], *, environ: Mapping[str, str]) -> None:
        self._environ = dict(environ)
        super().__init__(settings_cls)

    def _load_env_vars(self) -> Mapping[str, str | None]:
        if self.case_sensitive:
            return dict(self._environ)
        return {key.lower(): value for key, value in self._environ.items()}


def load_settings(
    *,
    cli_params: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
    config_path: str | Path | None = None,
) -> RpcErrorsSettings:
    """Resolve settings from CLI params, environment, YAML file and defaults.

    ``environ`` replaces the process environment as the env source when given;
    ``os.environ`` is only read, never modified.
    """
    yaml_file = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    env_source = (
        EnvSettingsSource(RpcErrorsSettings)
        if environ is None
        else MappingEnvSettingsSource(RpcErrorsSettings, environ=environ)
    )
    file_data = YamlConfigSettingsSource(RpcErrorsSettings, yaml_file=yaml_file)()
    env_data = env_source()
    cli_data = dict(cli_params) if cli_params is not None else {}

    merged = _merge_dicts(file_data, env_data)
    merged = _merge_dicts(merged, cli_data)
    return RpcErrorsSettings.model_validate(merged)


def _merge_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge mappings, with ``override`` taking precedence."""
    result = copy.deepcopy(dict(base))
    for key, override_value in override.items():
        base_value = result.get(key)
        if isinstance(base_value, dict) and isinstance(override_value, Mapping):
            result[key] = _merge_dicts(base_value, override_value)
            continue
        result[key] = copy.deepcopy(override_value)
    return result
