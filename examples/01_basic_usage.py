"""
Basic Request Usage Examples

Demonstrates GET with query params, POST forms, raw bodies and typed JSON.
"""

import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from pydantic import BaseModel

from http_request import Request, HTTPRequestException


class Post(BaseModel):
    id: int
    title: str
    userId: int


def basic_get_request():
    """GET with query params."""
    print("\n=== GET with params ===")

    request = (
        Request("https://jsonplaceholder.typicode.com/posts")
        .add_param("userId", 1)
        .set_timeouts(5000, 10000)
        .send()
    )

    print(f"Status: {request.get_response_code()} {request.get_response_message()}")
    print(f"Content-Type: {request.get_response_header('Content-Type')}")
    print(f"Body: {request.get_response_string()[:80]}...")


def post_form():
    """POST params are sent as a url-encoded form."""
    print("\n=== POST form ===")

    request = (
        Request("https://httpbin.org/post", Request.POST)
        .add_param("name", "widget")
        .add_param("comment", "hello world")
        .send()
    )

    print(f"Status: {request.get_response_code()}")
    print(f"Echoed form: {request.get_response_object()['form']}")


def put_json():
    """PUT with an explicit JSON body, decoded into a model."""
    print("\n=== PUT JSON ===")

    request = (
        Request("https://jsonplaceholder.typicode.com/posts/1", Request.PUT)
        .add_header("Content-Type", "application/json")
        .set_data('{"id": 1, "title": "Updated", "userId": 1}')
        .send()
    )

    post = request.get_response_object(Post)
    print(f"Updated: {post}")


def redirects_are_not_followed():
    """3xx responses come back as they are."""
    print("\n=== Redirect ===")

    with Request("https://httpbin.org/redirect-to?url=/get") as request:
        request.send()
        print(f"Status: {request.get_response_code()}")
        print(f"Location: {request.get_response_header('Location')}")


def error_handling():
    """Transport errors carry a retryable flag."""
    print("\n=== Error handling ===")

    try:
        Request("http://127.0.0.1:1/").set_connect_timeout(1000).send()
    except HTTPRequestException as e:
        print(f"{type(e).__name__}: {e}")
        print(f"Retryable: {e.retryable}")


if __name__ == "__main__":
    print("=" * 60)
    print("Request - Basic Usage Examples")
    print("=" * 60)

    try:
        basic_get_request()
        post_form()
        put_json()
        redirects_are_not_followed()
        error_handling()

        print("\n" + "=" * 60)
        print("All examples completed!")
        print("=" * 60)

    except Exception as e:
        print(f"\nError: {e}")
