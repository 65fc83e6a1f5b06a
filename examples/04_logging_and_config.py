"""
Logging and Configuration Examples.

Demonstrates request defaults from the environment and structured logs.
"""

import sys
import os
import tempfile

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from http_request import Request, RequestDefaults, LoggingConfig, load_from_env, load_from_file


def example_1_colored_logging():
    """Example 1: Colored console logs for every request."""
    print("\n" + "=" * 60)
    print("EXAMPLE 1: Colored Logging")
    print("=" * 60 + "\n")

    defaults = RequestDefaults.create(
        headers={"User-Agent": "examples/1.0"},
        connect_timeout_ms=5000,
        logging=LoggingConfig.create(level="INFO", format="colored"),
    )

    Request("https://httpbin.org/get", defaults=defaults).add_param("token", "hidden").send().close()


def example_2_env_file():
    """Example 2: Defaults from a .env file."""
    print("\n" + "=" * 60)
    print("EXAMPLE 2: .env file")
    print("=" * 60 + "\n")

    with tempfile.TemporaryDirectory() as tmpdir:
        env_file = os.path.join(tmpdir, ".env")
        with open(env_file, "w") as f:
            f.write("HTTP_REQUEST_CONNECT_TIMEOUT_MS=3000\n")
            f.write("HTTP_REQUEST_READ_TIMEOUT_MS=10000\n")
            f.write('HTTP_REQUEST_HEADERS={"Accept": "application/json"}\n')
            f.write("HTTP_REQUEST_LOG_ENABLED=true\n")
            f.write("HTTP_REQUEST_LOG_FORMAT=json\n")

        defaults = load_from_env(env_file=env_file)

    print(f"Timeouts: {defaults.timeout}")
    print(f"Headers: {dict(defaults.headers)}")
    Request("https://httpbin.org/get", defaults=defaults).send().close()


def example_3_config_file():
    """Example 3: Defaults from a JSON file."""
    print("\n" + "=" * 60)
    print("EXAMPLE 3: Config file")
    print("=" * 60 + "\n")

    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "http_request.json")
        with open(path, "w") as f:
            f.write('{"timeout": {"connect_ms": 2000}, "headers": {"X-Client": "examples"}}')

        defaults = load_from_file(path)

    print(f"Timeouts: {defaults.timeout}")
    print(f"Headers: {dict(defaults.headers)}")


if __name__ == "__main__":
    example_1_colored_logging()
    example_2_env_file()
    example_3_config_file()
