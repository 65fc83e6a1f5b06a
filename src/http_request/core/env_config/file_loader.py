"""
Request defaults from YAML and JSON files.
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import ValidationError

from ..config import ProxyConfig, RequestDefaults, TimeoutConfig
from ..exceptions import ConfigurationError
from .loader import build_logging_config
from .settings import RequestFileSettings


class ConfigFileError(ConfigurationError):
    """Файл конфигурации не найден, не парсится или не проходит валидацию."""
    pass


def _read_yaml(path: Path) -> Any:
    try:
        import yaml
    except ImportError:
        raise ConfigFileError(
            "PyYAML is required to load YAML configs. "
            "Install it with: pip install http-request-core[yaml] or pip install pyyaml"
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigFileError(f"Invalid YAML syntax in {path}: {e}")


def _read_json(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigFileError(f"Invalid JSON syntax in {path}: {e}")


def build_defaults(data: Dict[str, Any], source: str = "<dict>") -> RequestDefaults:
    """
    Validate a parsed config mapping and build RequestDefaults.

    Raises:
        ConfigFileError: Unknown keys or invalid values
    """
    try:
        settings = RequestFileSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigFileError(f"Invalid config in {source}: {e}")

    return RequestDefaults(
        headers=settings.headers,
        timeout=TimeoutConfig(connect_ms=settings.timeout.connect_ms, read_ms=settings.timeout.read_ms),
        proxy=ProxyConfig(settings.proxy.host, settings.proxy.port) if settings.proxy else None,
        chunk_size=settings.chunk_size,
        logging=build_logging_config(settings.logging),
    )


def load_from_file(path: Union[str, Path]) -> RequestDefaults:
    """
    Загрузить RequestDefaults из файла, формат по расширению (.yaml, .yml, .json).

    Args:
        path: Путь к конфиг файлу

    Returns:
        RequestDefaults instance

    Raises:
        ConfigFileError: Файл не найден, формат не поддерживается или конфиг невалидный

    Example:
        >>> defaults = load_from_file("http_request.yaml")
        >>> request = Request("https://api.example.com", defaults=defaults)
    """
    path = Path(path)
    if not path.exists():
        raise ConfigFileError(f"Config file not found: {path}")

    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path)
    elif suffix == ".json":
        data = _read_json(path)
    else:
        raise ConfigFileError(
            f"Unsupported config file format: {suffix}. "
            f"Supported formats: .yaml, .yml, .json"
        )

    if not data:
        raise ConfigFileError(f"Empty config file: {path}")
    if not isinstance(data, dict):
        raise ConfigFileError(f"Config root must be a mapping: {path}")

    return build_defaults(data, str(path))
