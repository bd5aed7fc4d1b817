"""
Dev server readiness check.

Development builds load the frontend from a local dev server (Vite on port 1420 by
default). Before the main window is shown we make sure something is listening there,
retrying briefly while the dev server finishes starting.
"""
import logging
import os
import socket
import time
from typing import Callable, List, Mapping, NamedTuple, Optional

logger = logging.getLogger(__name__)

DEV_SERVER_URL_VARS = ("MARGINALIA_DEV_SERVER_URL", "MARGINALIA_DEV_URL")
DEFAULT_DEV_SERVER_URL = "http://localhost:1420"

CONNECT_TIMEOUT = 0.25  # seconds, per address
RETRY_ATTEMPTS = 10
RETRY_DELAY = 0.2  # seconds between attempts

LOOPBACK_ALIASES = ("127.0.0.1", "::1")


class DevServerUrlError(ValueError):
    """The dev server URL cannot be turned into a host and port."""


class HostPort(NamedTuple):
    host: str
    port: int


def dev_server_url(environ: Optional[Mapping[str, str]] = None) -> str:
    """Get the dev server URL from the environment, or the default."""
    if environ is None:
        environ = os.environ
    for name in DEV_SERVER_URL_VARS:
        value = environ.get(name)
        if value is not None:
            return value
    return DEFAULT_DEV_SERVER_URL


def parse_host_port(url: str) -> HostPort:
    """
    Extract host and port from a dev server URL.

    Accepts `http://host:port/path`, `https://host` and bare `host:port`. The scheme
    only picks the default port (443 for https, 80 otherwise).

    Raises:
        DevServerUrlError: if no host can be found.
    """
    trimmed = (url or "").strip()
    if not trimmed:
        raise DevServerUrlError("dev server URL is empty")

    if trimmed.startswith("https://"):
        default_port, rest = 443, trimmed[len("https://"):]
    elif trimmed.startswith("http://"):
        default_port, rest = 80, trimmed[len("http://"):]
    else:
        default_port, rest = 80, trimmed

    host_port = rest.split("/", 1)[0]
    if not host_port:
        raise DevServerUrlError(f"no host in dev server URL: {url!r}")

    host, sep, port_text = host_port.rpartition(":")
    if not sep:
        host, port_text = host_port, ""
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    if not host:
        raise DevServerUrlError(f"no host in dev server URL: {url!r}")

    port = default_port
    if port_text.isascii() and port_text.isdigit() and int(port_text) <= 65535:
        port = int(port_text)
    return HostPort(host, port)


def candidate_hosts(host: str) -> List[str]:
    """Hosts to try; `localhost` also tries both loopback literals."""
    hosts = [host]
    if host.lower() == "localhost":
        hosts.extend(LOOPBACK_ALIASES)
    return hosts


def dev_server_origins(url: str) -> List[str]:
    """
    Browser origins the dev server frontend can present, e.g. `http://localhost:1420`.

    Empty for a malformed URL.
    """
    try:
        target = parse_host_port(url)
    except DevServerUrlError:
        return []
    scheme = "https" if url.strip().startswith("https://") else "http"
    # Browsers leave the scheme's default port out of Origin
    port = "" if target.port == {"https": 443, "http": 80}[scheme] else f":{target.port}"
    origins = []
    for host in candidate_hosts(target.host):
        if ":" in host:
            host = f"[{host}]"
        origins.append(f"{scheme}://{host}{port}")
    return origins


def can_connect(host: str, port: int, timeout: float = CONNECT_TIMEOUT) -> bool:
    """Check whether any resolved address for host:port accepts a TCP connection."""
    try:
        addresses = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
    except (OSError, UnicodeError):
        return False

    for family, socktype, proto, _, sockaddr in addresses:
        try:
            with socket.socket(family, socktype, proto) as sock:
                sock.settimeout(timeout)
                sock.connect(sockaddr)
                return True
        except OSError:
            continue
    return False


def _any_candidate_connects(target: HostPort, connect: Callable[[str, int], bool]) -> bool:
    return any(connect(host, target.port) for host in candidate_hosts(target.host))


def is_reachable(url: Optional[str] = None, connect: Callable[[str, int], bool] = can_connect) -> bool:
    """Single reachability attempt against the dev server."""
    if url is None:
        url = dev_server_url()
    try:
        target = parse_host_port(url)
    except DevServerUrlError as e:
        logger.warning("Dev server URL is invalid: %s", e)
        return False
    return _any_candidate_connects(target, connect)


def is_reachable_with_retry(
    url: Optional[str] = None,
    attempts: int = RETRY_ATTEMPTS,
    delay: float = RETRY_DELAY,
    connect: Callable[[str, int], bool] = can_connect,
) -> bool:
    """
    Check the dev server, retrying a fixed number of times with a fixed delay.

    A malformed URL is reported as unreachable right away since retrying cannot help.
    Blocks the calling thread for at most `attempts * delay` plus connect timeouts.
    """
    if url is None:
        url = dev_server_url()
    try:
        target = parse_host_port(url)
    except DevServerUrlError as e:
        logger.warning("Dev server URL is invalid: %s", e)
        return False

    for attempt in range(1, attempts + 1):
        if _any_candidate_connects(target, connect):
            logger.info("Dev server reachable at %s:%s (attempt %d)", target.host, target.port, attempt)
            return True
        logger.debug("Dev server not reachable yet (attempt %d/%d)", attempt, attempts)
        time.sleep(delay)

    logger.error("Dev server at %s:%s unreachable after %d attempts", target.host, target.port, attempts)
    return False
