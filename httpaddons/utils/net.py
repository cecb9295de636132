"""Request network helpers."""

from starlette.requests import HTTPConnection


def client_ip(conn: HTTPConnection) -> str:
    """Best-effort client address.

    Proxy headers win over the socket peer: the first ``X-Forwarded-For``
    hop, then ``X-Real-Ip``, then the ASGI ``client`` host.
    """
    forwarded = conn.headers.get("x-forwarded-for", "")
    first_hop = forwarded.split(",")[0].strip()
    if first_hop:
        return first_hop

    real_ip = conn.headers.get("x-real-ip", "").strip()
    if real_ip:
        return real_ip

    if conn.client is not None:
        return conn.client.host
    return ""
