"""FastAPI inspection surface for tools, reloads and traces."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import Body, FastAPI, HTTPException

from doc_expert.config import ExpertConfig
from doc_expert.errors import InvalidArguments, UnknownTool
from doc_expert.service import ExpertService


def create_app(service: ExpertService | None = None) -> FastAPI:
    """Build the HTTP app; without a service one is created from the environment.

    Run with ``uvicorn --factory doc_expert.api.main:create_app``.
    """

    if service is None:
        service = ExpertService.from_config(ExpertConfig.from_env())

    app = FastAPI(title="Documentation Expert", version="1.0.0")

    @app.get("/health")
    def health() -> dict[str, Any]:
        return {
            "status": "ok",
            "documents_loaded": len(service.store.snapshot()),
            "description_cached": service.descriptions.get() is not None,
            "trace_count": len(service.trace_store),
        }

    @app.get("/tools")
    async def list_tools() -> dict[str, Any]:
        return await service.dispatcher.list_tools()

    @app.post("/tools/{name}")
    async def call_tool(
        name: str, arguments: dict[str, Any] | None = Body(default=None)
    ) -> dict[str, Any]:
        try:
            return await service.dispatcher.call_tool(name, arguments)
        except UnknownTool as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except InvalidArguments as exc:
            raise HTTPException(
                status_code=422,
                detail={
                    "message": str(exc),
                    "violations": [
                        {"field": field, "reason": reason} for field, reason in exc.violations
                    ],
                },
            ) from exc

    @app.post("/reload")
    async def reload() -> dict[str, Any]:
        description = await service.reload()
        return {
            "documents_loaded": len(service.store.snapshot()),
            "service_description": description,
        }

    @app.get("/traces")
    def traces(limit: int = 20) -> dict[str, Any]:
        return {"items": [asdict(trace) for trace in service.trace_store.list_recent(limit=limit)]}

    @app.get("/traces/{trace_id}")
    def trace(trace_id: str) -> dict[str, Any]:
        try:
            return asdict(service.trace_store.get(trace_id))
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Trace not found: {trace_id}") from exc

    @app.get("/metrics")
    def metrics() -> dict[str, Any]:
        return service.trace_store.summary()

    return app
