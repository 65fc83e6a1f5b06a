"""
File Transfer Examples

Demonstrates downloads with progress tracking and streaming uploads.
"""

import sys
import os
import tempfile

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from http_request import Request


def basic_download():
    """Save a response body to a file."""
    print("\n=== Basic Download ===")

    with tempfile.TemporaryDirectory() as tmpdir:
        output_path = os.path.join(tmpdir, "downloaded.json")

        request = Request("https://httpbin.org/json").send()
        bytes_downloaded = request.write_response_to_file(output_path)

        print(f"Downloaded: {bytes_downloaded} bytes")
        print(f"Saved to: {output_path}")


def download_with_progress():
    """Download with a custom listener or a tqdm bar."""
    print("\n=== Download with Progress ===")

    def on_progress(received, total):
        if total > 0:
            print(f"\r  {received}/{total} bytes ({received * 100 // total}%)", end="")
        else:
            print(f"\r  {received} bytes", end="")

    with tempfile.TemporaryDirectory() as tmpdir:
        output_path = os.path.join(tmpdir, "image.jpeg")

        request = (
            Request("https://httpbin.org/image/jpeg")
            .set_download_progress_listener(on_progress)
            .send()
        )
        request.write_response_to_file(output_path)
        print()

        try:
            import tqdm  # noqa: F401
        except ImportError:
            print("Note: Install tqdm for progress bars: pip install http-request-core[progress]")
            return

        Request("https://httpbin.org/bytes/102400").send().write_response_to_file(
            os.path.join(tmpdir, "random.bin"),
            show_progress=True,
        )


def upload_file():
    """Stream a file as the request body."""
    print("\n=== Upload File ===")

    with tempfile.NamedTemporaryFile(delete=False, suffix=".bin") as f:
        f.write(os.urandom(64 * 1024))
        path = f.name

    try:
        request = (
            Request("https://httpbin.org/put", Request.PUT)
            .set_file(path)
            .set_upload_progress_listener(lambda sent, total: None)
            .send()
        )
        print(f"Status: {request.get_response_code()}")
        request.close()
    finally:
        os.remove(path)


def streaming_response():
    """Read the live stream; the caller closes the connection."""
    print("\n=== Streaming Response ===")

    request = Request("https://httpbin.org/stream-bytes/4096").send()
    try:
        stream = request.get_response_stream()
        first = stream.read(1024)
        print(f"First chunk: {len(first)} bytes")
    finally:
        request.close()


if __name__ == "__main__":
    print("=" * 60)
    print("Request - File Transfer Examples")
    print("=" * 60)

    try:
        basic_download()
        download_with_progress()
        upload_file()
        streaming_response()

        print("\n" + "=" * 60)
        print("All examples completed!")
        print("=" * 60)

    except Exception as e:
        print(f"\nError: {e}")
