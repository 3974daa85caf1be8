"""
Configuration file loader for YAML and JSON files.

Supports loading LoggerOptions from external configuration files.

Example config.yaml:
    fanout_logger:
      level: warn
      context: billing-api
      log_entries: [timestamp, level, context, message]
      http:
        url: https://logs.example.com/ingest
        headers:
          X-Source: billing
        auth:
          bearer: secret-token
      file:
        filename: app.log
        dirname: /var/log/billing
        when: midnight
        backup_count: 7
"""

import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TextIO, Union

import yaml

from ..config import AuthConfig, FileSinkConfig, HttpSinkConfig, LoggerOptions, DEFAULT_LOG_ENTRIES
from ..exceptions import ConfigValidationError
from ..levels import parse_severity


class ConfigFileLoader:
    """
    Загрузчик конфигурации из файлов.

    Supports YAML and JSON formats with automatic format detection.

    Examples:
        >>> options = ConfigFileLoader.from_yaml("logger.yaml")
        >>> options = ConfigFileLoader.from_json("logger.json")
        >>> options = ConfigFileLoader.from_file("logger.yaml")  # Auto-detect
        >>> options = ConfigFileLoader.from_env_path()  # From FANOUT_LOGGER_CONFIG_FILE env var
    """

    @staticmethod
    def _read(path: Union[str, Path], parse: Callable[[TextIO], Any], errors, kind: str) -> LoggerOptions:
        """Прочитать и разобрать файл; пустой файл считается ошибкой."""
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Config file not found: {path}")

        with path.open(encoding="utf-8") as stream:
            try:
                data = parse(stream)
            except errors as e:
                raise ConfigValidationError(f"Invalid {kind} syntax in {path}: {e}") from e

        if not data:
            raise ConfigValidationError(f"Empty config file: {path}")
        return ConfigFileLoader._build_options(data, str(path))

    @staticmethod
    def from_yaml(path: Union[str, Path]) -> LoggerOptions:
        """
        Загрузить конфиг из YAML файла.

        Raises:
            FileNotFoundError: Если файл не найден
            ConfigValidationError: Если YAML или конфиг невалидный
        """
        return ConfigFileLoader._read(path, yaml.safe_load, yaml.YAMLError, "YAML")

    @staticmethod
    def from_json(path: Union[str, Path]) -> LoggerOptions:
        """Загрузить конфиг из JSON файла."""
        return ConfigFileLoader._read(path, json.load, json.JSONDecodeError, "JSON")

    @staticmethod
    def from_file(path: Union[str, Path]) -> LoggerOptions:
        """
        Автоопределение формата по расширению (.yaml, .yml, .json).

        Raises:
            ValueError: Если формат не поддерживается
        """
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix in [".yaml", ".yml"]:
            return ConfigFileLoader.from_yaml(path)
        elif suffix == ".json":
            return ConfigFileLoader.from_json(path)
        else:
            raise ValueError(
                f"Unsupported config file format: {suffix}. "
                f"Supported formats: .yaml, .yml, .json"
            )

    @staticmethod
    def from_env_path() -> Optional[LoggerOptions]:
        """Загрузить из пути, указанного в FANOUT_LOGGER_CONFIG_FILE."""
        config_path = os.environ.get("FANOUT_LOGGER_CONFIG_FILE")
        if not config_path:
            return None

        return ConfigFileLoader.from_file(config_path)

    @staticmethod
    def _section(data: Dict[str, Any], name: str, source: str) -> Optional[Dict[str, Any]]:
        if name not in data or data[name] is None:
            return None
        section = data[name]
        if not isinstance(section, dict):
            raise ConfigValidationError(f"{name} must be a dictionary in {source}")
        return section

    @staticmethod
    def _build_options(data: Dict[str, Any], source: str) -> LoggerOptions:
        """
        Build LoggerOptions from parsed data.

        Raises:
            ConfigValidationError: If config is invalid
        """
        # Extract fanout_logger section if present
        config_data = data.get("fanout_logger", data) if isinstance(data, dict) else data

        if not isinstance(config_data, dict):
            raise ConfigValidationError(
                f"Config must be a dictionary, got {type(config_data).__name__} in {source}"
            )

        level = config_data.get("level", "verbose")
        if parse_severity(level) is None:
            raise ConfigValidationError(f"Unknown level {level!r} in {source}")

        try:
            http_cfg = None
            http_data = ConfigFileLoader._section(config_data, "http", source)
            if http_data is not None:
                auth_data = ConfigFileLoader._section(http_data, "auth", source)
                headers = http_data.get("headers", {})
                if not isinstance(headers, dict):
                    raise ConfigValidationError(f"http.headers must be a dictionary in {source}")
                http_cfg = HttpSinkConfig(
                    url=http_data.get("url", ""),
                    headers=headers,
                    auth=AuthConfig.from_value(auth_data),
                    timeout=http_data.get("timeout"),
                    verify_ssl=http_data.get("verify_ssl", True),
                )

            file_cfg = None
            file_data = ConfigFileLoader._section(config_data, "file", source)
            if file_data is not None:
                file_cfg = FileSinkConfig(**file_data)

            console_data = ConfigFileLoader._section(config_data, "console", source) or {}

            return LoggerOptions(
                level=level,
                context=config_data.get("context"),
                file=file_cfg,
                http=http_cfg,
                log_entries=tuple(config_data.get("log_entries") or DEFAULT_LOG_ENTRIES),
                console=console_data.get("enabled", True),
                console_format=console_data.get("format", "text"),
            )

        except (ValueError, TypeError) as e:
            if isinstance(e, ConfigValidationError):
                raise
            raise ConfigValidationError(f"Invalid config in {source}: {e}")
