"""
Configuration loading and validation for the database backup tool.
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigurationError
from .models import ALL_TABLES, DumpRequest, StorageSettings


class ConfigLoader:
    """Loads and validates configuration from YAML file."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')

    def __init__(self, config_path: str):
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        if not isinstance(config, dict):
            raise ConfigurationError(f"Configuration file '{self.config_path}' must contain a mapping")
        return self._resolve_env_vars(config)

    def _resolve_env_vars(self, obj: Any) -> Any:
        """Recursively resolve environment variables in config."""
        if isinstance(obj, str):
            matches = self.ENV_VAR_PATTERN.findall(obj)
            for match in matches:
                env_value = os.environ.get(match, '')
                obj = obj.replace(f'${{{match}}}', env_value)
            return obj
        elif isinstance(obj, dict):
            return {k: self._resolve_env_vars(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._resolve_env_vars(item) for item in obj]
        return obj

    def _section(self, name: str) -> dict[str, Any]:
        section = self.config.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigurationError(f"Configuration section '{name}' must be a mapping")
        return section

    def get_database_settings(self) -> dict[str, Any]:
        """Get database connection settings."""
        return self._section('database')

    def get_dump_settings(self) -> dict[str, Any]:
        """Get dump settings."""
        return self._section('dump')

    def get_logging_settings(self) -> dict[str, Any]:
        """Get logging settings."""
        return self._section('logging')

    def get_dump_request(self) -> DumpRequest:
        """Build and validate the DumpRequest for this configuration."""
        db = self.get_database_settings()
        dump = self.get_dump_settings()

        tables = dump.get('tables', ALL_TABLES)
        if isinstance(tables, list):
            tables = tuple(str(t).strip() for t in tables)

        try:
            port = int(db.get('port') or DumpRequest.port)
            batch_size = int(dump.get('batch_size', DumpRequest.batch_size))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid numeric setting: {e}") from e

        request = DumpRequest(
            host=str(db.get('host') or ''),
            port=port,
            user=str(db.get('user') or ''),
            password=str(db.get('password') or ''),
            database=str(db.get('name') or ''),
            charset=str(db.get('charset') or DumpRequest.charset),
            output_dir=Path(dump.get('directory') or './backups'),
            tables=tables,
            ignore_tables=frozenset(_as_name_list(dump.get('exclude_tables'))),
            compress=_as_bool(dump.get('compress', True)),
            disable_foreign_key_checks=_as_bool(dump.get('disable_foreign_key_checks', True)),
            batch_size=batch_size
        )
        request.validate()
        return request

    def get_storage_settings(self) -> StorageSettings:
        """Build and validate the object storage settings."""
        storage = self._section('storage')
        settings = StorageSettings(
            bucket=str(storage.get('bucket') or ''),
            region=storage.get('region') or None,
            access_key_id=storage.get('access_key_id') or None,
            secret_access_key=storage.get('secret_access_key') or None,
            key_prefix=storage.get('key_prefix')
        )
        settings.validate()
        return settings


def _as_name_list(value: Any) -> list[str]:
    """Accept a YAML list or a comma-separated string of table names."""
    if not value:
        return []
    if isinstance(value, str):
        value = value.split(',')
    elif not isinstance(value, (list, tuple)):
        raise ConfigurationError(f"Expected a list or comma-separated string, got {value!r}")
    return [name for name in (str(item).strip() for item in value) if name]


def _as_bool(value: Any) -> bool:
    """Accept YAML booleans as well as strings produced by ${ENV} substitution."""
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)
