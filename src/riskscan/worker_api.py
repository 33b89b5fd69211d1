from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse

from riskscan.services.dispatcher import Dispatcher

logger = logging.getLogger(__name__)


def create_app(services: dict[str, Any] | None = None) -> FastAPI:
    if services is None:
        from riskscan.container import build_services

        services = build_services()
    dispatcher: Dispatcher = services["dispatcher"]

    app = FastAPI(title="riskscan worker")

    @app.get("/healthz", response_class=PlainTextResponse)
    def healthz() -> str:
        return "ok"

    @app.post("/_pubsub/analyze", response_class=PlainTextResponse)
    async def analyze(request: Request) -> str:
        # Always 200: any other answer makes the transport redeliver the message.
        try:
            envelope = json.loads(await request.body() or b"null")
        except (ValueError, RecursionError):
            envelope = None
        try:
            await run_in_threadpool(dispatcher.handle_push, envelope)
        except Exception:
            logger.exception("push handler failed")
        return "ok"

    return app
