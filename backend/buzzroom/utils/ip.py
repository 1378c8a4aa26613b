from __future__ import annotations

import ipaddress
import socket

from flask import Request


def get_client_ip(request: Request) -> str | None:
    x_real_ip = request.headers.get("X-Real-IP")
    if x_real_ip:
        return x_real_ip.strip()

    xff = request.headers.get("X-Forwarded-For")
    if xff:
        parts = [p.strip() for p in xff.split(",") if p.strip()]
        if parts:
            return parts[0]

    if request.remote_addr:
        return request.remote_addr

    return None


def _is_private_lan(ip: str) -> bool:
    try:
        addr = ipaddress.IPv4Address(ip)
    except ValueError:
        return False
    return addr.is_private and not addr.is_loopback and not addr.is_link_local


def _candidate_ipv4s() -> list[str]:
    found: list[str] = []

    # Routing trick: no packet is sent, but the OS picks the outbound interface.
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
            s.connect(("10.255.255.255", 1))
            found.append(s.getsockname()[0])
    except OSError:
        pass

    try:
        for info in socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET):
            ip = info[4][0]
            if ip not in found:
                found.append(ip)
    except OSError:
        pass

    return found


def get_lan_ipv4() -> str:
    """Best guess at the address players on the same network should use."""
    candidates = _candidate_ipv4s()
    for ip in candidates:
        if _is_private_lan(ip):
            return ip
    for ip in candidates:
        if not ip.startswith("127."):
            return ip
    return "127.0.0.1"
