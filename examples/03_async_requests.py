"""
Asynchronous Request Examples

Demonstrates callbacks, futures and dedicated executors.
"""

import sys
import os
import threading

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from http_request import Request, RequestExecutor, SENTINEL_STATUS


def callback_send():
    """send(callback) returns at once; the callback runs on a worker."""
    print("\n=== Callback ===")

    done = threading.Event()

    def on_result(request):
        if request.get_response_code() == SENTINEL_STATUS:
            print(f"Failed: {request.get_response_message()}")
        else:
            print(f"Status: {request.get_response_code()}")
            request.close()
        done.set()

    Request("https://httpbin.org/delay/1").send(on_result)
    print("Request sent, waiting...")
    done.wait(10)


def futures():
    """send_async() returns a Future resolved with the request."""
    print("\n=== Futures ===")

    with RequestExecutor(max_workers=4) as executor:
        pending = [
            Request(f"https://httpbin.org/status/{code}").send_async(executor=executor)
            for code in (200, 404, 500)
        ]
        for future in pending:
            request = future.result(timeout=10)
            print(f"{request.url}: {request.get_response_code()}")
            request.close()


def unreachable_host():
    """Failures never raise on the async path."""
    print("\n=== Unreachable host ===")

    request = Request("http://127.0.0.1:1/").set_connect_timeout(1000)
    result = request.send_async().result(timeout=10)
    print(f"Code: {result.get_response_code()}")
    print(f"Message: {result.get_response_message()}")


if __name__ == "__main__":
    print("=" * 60)
    print("Request - Async Examples")
    print("=" * 60)

    callback_send()
    futures()
    unreachable_host()
