"""Process entrypoint: ``python -m mini_rag.serving``."""

from __future__ import annotations

import logging

import uvicorn

from mini_rag.config import settings


def main() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info("RAG backend listening on http://%s:%d", settings.host, settings.port)
    uvicorn.run("mini_rag.serving.app:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
