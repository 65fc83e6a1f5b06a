# src/http_request/utils/sanitizer.py
"""
Маскирование чувствительных данных перед записью в лог.

Заголовки запроса, параметры и URL попадают в структурированные логи,
поэтому токены, пароли и куки заменяются на MASK.
"""

import re
from typing import Any, Dict, Iterable, Set
from urllib.parse import parse_qsl, urlsplit, urlunsplit

from .encoding import encode_params

MASK = "***REDACTED***"

# Имена (в нижнем регистре), значения которых никогда не логируются.
# Совпадение по подстроке: "x-api-key" содержит "api-key".
SENSITIVE_KEYS: Set[str] = {
    'authorization', 'proxy-authorization', 'cookie', 'set-cookie',
    'password', 'passwd', 'secret', 'token', 'api_key', 'api-key', 'apikey',
    'session', 'credential', 'private_key',
}

# Bearer/Basic значения внутри произвольных строк
_AUTH_VALUE_RE = re.compile(r'\b(Bearer|Basic)\s+[A-Za-z0-9\-._~+/]+=*', re.IGNORECASE)


def is_sensitive_key(key: str) -> bool:
    """
    Проверяет, является ли имя поля чувствительным.

    Examples:
        >>> is_sensitive_key("Authorization")
        True
        >>> is_sensitive_key("X-Api-Key")
        True
        >>> is_sensitive_key("Content-Type")
        False
    """
    lowered = key.lower()
    return any(sensitive in lowered for sensitive in SENSITIVE_KEYS)


def mask_url(url: str) -> str:
    """
    Маскирует пароль в userinfo и чувствительные query параметры.

    Examples:
        >>> mask_url("https://user:pw@h/p?token=abc&page=1")
        'https://user:***REDACTED***@h/p?token=%2A%2A%2AREDACTED%2A%2A%2A&page=1'
    """
    parts = urlsplit(url)
    netloc = parts.netloc
    if "@" in netloc:
        userinfo, host = netloc.rsplit("@", 1)
        if ":" in userinfo:
            netloc = f"{userinfo.split(':', 1)[0]}:{MASK}@{host}"

    query = parts.query
    if query:
        pairs = parse_qsl(query, keep_blank_values=True)
        query = encode_params({
            name: (MASK if is_sensitive_key(name) else value) for name, value in pairs
        })

    return urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))


def mask_headers(headers: Iterable) -> Dict[str, str]:
    """
    Возвращает копию заголовков с замаскированными значениями.

    Args:
        headers: Mapping или последовательность пар (name, value)
    """
    items = headers.items() if hasattr(headers, "items") else headers
    return {name: (MASK if is_sensitive_key(name) else value) for name, value in items}


def mask_sensitive_data(data: Any) -> Any:
    """
    Рекурсивно маскирует чувствительные данные в полях лога.

    Строки проверяются на Bearer/Basic значения, словари по именам ключей.

    Example:
        >>> mask_sensitive_data({"headers": {"Authorization": "Bearer abc"}, "status": 200})
        {'headers': {'Authorization': '***REDACTED***'}, 'status': 200}
    """
    if data is None or isinstance(data, (bool, int, float)):
        return data

    if isinstance(data, str):
        return _AUTH_VALUE_RE.sub(lambda m: f"{m.group(1)} {MASK}", data)

    if isinstance(data, dict):
        return {
            key: (MASK if isinstance(key, str) and is_sensitive_key(key) else mask_sensitive_data(value))
            for key, value in data.items()
        }

    if isinstance(data, (list, tuple)):
        return type(data)(mask_sensitive_data(item) for item in data)

    return data
