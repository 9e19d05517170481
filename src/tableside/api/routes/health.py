from __future__ import annotations

from fastapi import APIRouter, Request, Response, status

router = APIRouter()


@router.get("/health/live")
def live() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready")
def ready(request: Request, response: Response) -> dict[str, object]:
    runtime_ready = getattr(request.app.state, "runtime", None) is not None
    fanout_task = getattr(request.app.state, "ws_fanout_task", None)
    fanout_ready = fanout_task is not None and not fanout_task.done()

    if runtime_ready and fanout_ready:
        return {"status": "ok"}

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {
        "status": "unavailable",
        "checks": {"runtime": runtime_ready, "wsFanout": fanout_ready},
    }
