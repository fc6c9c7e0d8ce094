from __future__ import annotations

from collections.abc import Callable

from fastapi import Header, HTTPException

from legis_graph.settings import LegisGraphSettings


def require_api_key(cfg: LegisGraphSettings) -> Callable[..., None]:
    """Dependency that checks `X-API-Key` against `cfg.api_key`.

    With no key configured every request is let through.
    """
    expected = cfg.api_key

    def check(x_api_key: str | None = Header(default=None)) -> None:
        if not expected:
            return
        if (x_api_key or "") != expected:
            raise HTTPException(status_code=401, detail="invalid API key")

    return check
