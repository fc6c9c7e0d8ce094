from __future__ import annotations

import asyncio
import logging

import uvicorn

from legis_graph.settings import settings

from .app import create_app
from .db import PostgresRecordSource


async def _main() -> None:
    logging.basicConfig(
        level=(settings.log_level or "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    source = await PostgresRecordSource.connect(settings.postgres_dsn)
    app = create_app(source)

    config = uvicorn.Config(
        app,
        host=settings.bind_host,
        port=settings.bind_port,
        log_level=(settings.log_level or "info").lower(),
        loop="uvloop",
        http="httptools",
    )
    server = uvicorn.Server(config)

    try:
        await server.serve()
    finally:
        await source.close()


def main() -> None:
    asyncio.run(_main())


if __name__ == "__main__":
    main()
