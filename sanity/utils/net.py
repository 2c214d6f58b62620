"""Connectivity checks — HTTP(S), TCP connect, DNS resolve.

Each returns a status string ready to be returned from a module handler,
e.g. ``"PASS: 200 OK (42.1ms)"`` or ``"FAIL: Connection error: ..."``.
"""

from __future__ import annotations

import socket
import time

import httpx


def _elapsed(t0: float) -> float:
    return round((time.perf_counter() - t0) * 1000, 1)


def check_http(
    url: str,
    method: str = "GET",
    expected_status: int = 200,
    timeout_ms: int = 10_000,
    slow_ms: int = 3_000,
) -> str:
    """HTTP(S) check — status code plus latency. WARN when slower than ``slow_ms``."""
    t0 = time.perf_counter()
    try:
        with httpx.Client(timeout=timeout_ms / 1000, follow_redirects=True) as client:
            resp = client.request(method, url)
    except httpx.TimeoutException:
        return f"TIME: No response from {url} within {timeout_ms}ms"
    except httpx.HTTPError as e:
        return f"FAIL: Connection error: {e}"

    latency = _elapsed(t0)
    if resp.status_code != expected_status:
        return f"FAIL: Expected {expected_status}, got {resp.status_code} ({latency}ms)"
    if latency > slow_ms:
        return f"WARN: {resp.status_code} OK but slow ({latency}ms)"
    return f"PASS: {resp.status_code} OK ({latency}ms)"


def check_tcp(hostname: str, port: int = 443, timeout_ms: int = 5_000) -> str:
    """Raw TCP port connectivity check."""
    t0 = time.perf_counter()
    try:
        sock = socket.create_connection((hostname, port), timeout=timeout_ms / 1000)
        sock.close()
    except socket.timeout:
        return f"TIME: {hostname}:{port} did not answer within {timeout_ms}ms"
    except OSError as e:
        return f"FAIL: TCP connect to {hostname}:{port} failed: {e}"
    return f"PASS: Port {port} open on {hostname} ({_elapsed(t0)}ms)"


def check_dns(hostname: str) -> str:
    """DNS resolution check."""
    t0 = time.perf_counter()
    try:
        addrs = socket.getaddrinfo(hostname, None)
    except socket.gaierror as e:
        return f"FAIL: DNS resolution failed for {hostname}: {e}"

    ips = sorted({a[4][0] for a in addrs})
    return f"PASS: {hostname} resolved to {', '.join(ips[:3])} ({_elapsed(t0)}ms)"
