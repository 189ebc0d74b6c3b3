from __future__ import annotations


def join_url(base_url: str, path: str) -> str:
    base = (base_url or "").strip().rstrip("/")
    relative = (path or "").strip().lstrip("/")
    if not relative:
        return base
    return f"{base}/{relative}"
