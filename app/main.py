"""
Hawkward server launcher

Starts the local server, prints where it can be reached and opens the
client in the default browser. The process exits on its own once the
browser tab stops sending heartbeats.

Run from the repository root:

    python app/main.py
"""

import socket
import sys
import threading
import webbrowser
from pathlib import Path

import structlog
import uvicorn

# Allow running as a script from the repository root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from hawkward.api import create_app
from hawkward.config import get_settings, validate_all_settings
from hawkward.diagnostics import configure_logging


logger = structlog.get_logger("hawkward.main")


def get_local_ip() -> str:
    """First non-loopback IPv4 address, or 'localhost'."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
            # No packet is sent; connect() only selects the outgoing interface
            s.connect(("10.255.255.255", 1))
            return s.getsockname()[0]
    except OSError:
        return "localhost"


def print_banner(port: int, host: str, timeout_seconds: float, auto_shutdown: bool) -> None:
    line = "-" * 50
    print(f"\033[32m{line}\033[0m")
    print("\033[32mHawkward Server is running!\033[0m")
    print(f"\033[32m{line}\033[0m")
    print(f"Local Access:   http://localhost:{port}")
    if host == "0.0.0.0":
        print(f"Network Access: http://{get_local_ip()}:{port}")
    print(line)
    if auto_shutdown:
        print(f"Auto-shutdown active: Server will exit {timeout_seconds:g}s after tab is closed.")
    else:
        print("Auto-shutdown inactive.")


def open_browser(url: str) -> None:
    try:
        if webbrowser.open(url):
            return
    except webbrowser.Error as e:
        logger.warning("browser_open_failed", error=str(e), url=url)
    print(f"Please open your browser manually at {url}")


def main() -> int:
    settings = get_settings()

    checks = validate_all_settings()
    failed = [name for name, ok in checks.items() if ok is False]
    if failed:
        for name in failed:
            print(f"Invalid configuration [{name}]: {checks[f'{name}_error']}", file=sys.stderr)
        return 1

    server = settings.server
    lifecycle = settings.lifecycle
    configure_logging(server.log_level)

    app = create_app(server_settings=server)

    print_banner(
        port=server.port,
        host=server.host,
        timeout_seconds=lifecycle.timeout_seconds,
        auto_shutdown=lifecycle.enabled and not lifecycle.suppressed,
    )
    if server.open_browser and not lifecycle.suppressed:
        threading.Timer(1.0, open_browser, args=[server.local_url]).start()

    uvicorn.run(app, host=server.host, port=server.port, log_level=server.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
