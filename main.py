import logging
import uuid
from typing import Dict, List

from fastapi import FastAPI, File, UploadFile, HTTPException, Request
from fastapi.responses import JSONResponse, Response

from app import config as settings
from app.exceptions import SwarmError, InvalidConfiguration
from app.models.models import (
    CreateSwarmRequest,
    Landmark,
    OptimizeRequest,
    OptimizeResponse,
    SwarmSessionResponse,
)
from app.services.driver import SwarmRunner
from app.services.objectives import LandmarkObjective
from app.services.pso import Swarm
from app.services.report import generate_swarm_report
from app.utils import process_landmark_file

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Particle Swarm Explorer",
    version="1.0.0"
)

# In-memory sessions; nothing is persisted
sessions: Dict[str, SwarmRunner] = {}


@app.exception_handler(SwarmError)
async def swarm_error_handler(request: Request, exc: SwarmError):
    logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


def _get_runner(session_id: str) -> SwarmRunner:
    runner = sessions.get(session_id)
    if runner is None:
        raise HTTPException(404, f"Unknown swarm session '{session_id}'")
    return runner


def _session_response(session_id: str, runner: SwarmRunner) -> SwarmSessionResponse:
    return SwarmSessionResponse(
        session_id=session_id,
        iteration=runner.iteration,
        max_iter=runner.max_iter,
        stopped=runner.stopped,
        snapshot=runner.swarm.snapshot(),
    )


@app.post("/api/swarms", response_model=SwarmSessionResponse)
async def create_swarm(request: CreateSwarmRequest):
    if len(sessions) >= settings.MAX_SESSIONS:
        raise HTTPException(429, "Too many active swarm sessions")

    max_iter = request.max_iter if request.max_iter is not None else settings.DEFAULT_MAX_ITER
    if max_iter < 0:
        raise InvalidConfiguration(f"max_iter must be non-negative, got {max_iter}")

    swarm = Swarm(request.config).initialize()
    session_id = uuid.uuid4().hex
    sessions[session_id] = SwarmRunner(swarm, max_iter=max_iter)
    logger.info("Created swarm session %s", session_id)
    return _session_response(session_id, sessions[session_id])


@app.get("/api/swarms/{session_id}", response_model=SwarmSessionResponse)
async def get_swarm(session_id: str):
    return _session_response(session_id, _get_runner(session_id))


@app.post("/api/swarms/{session_id}/step", response_model=SwarmSessionResponse)
async def step_swarm(session_id: str, ticks: int = 1):
    runner = _get_runner(session_id)
    if ticks < 1:
        raise HTTPException(400, "ticks must be at least 1")
    runner.run(min(ticks, settings.MAX_TICKS_PER_REQUEST))
    return _session_response(session_id, runner)


@app.post("/api/swarms/{session_id}/stop", response_model=SwarmSessionResponse)
async def stop_swarm(session_id: str):
    runner = _get_runner(session_id)
    runner.stop()
    return _session_response(session_id, runner)


@app.post("/api/swarms/{session_id}/reset", response_model=SwarmSessionResponse)
async def reset_swarm(session_id: str):
    runner = _get_runner(session_id)
    runner.reset()
    return _session_response(session_id, runner)


@app.put("/api/swarms/{session_id}/landmarks", response_model=SwarmSessionResponse)
async def update_landmarks(session_id: str, landmarks: List[Landmark]):
    runner = _get_runner(session_id)
    objective = runner.swarm.objective
    if not isinstance(objective, LandmarkObjective):
        raise InvalidConfiguration(
            f"Swarm objective '{objective.name}' has no landmarks",
            "create the swarm with objective 'landmarks'",
        )
    objective.set_landmarks(landmarks)
    return _session_response(session_id, runner)


@app.delete("/api/swarms/{session_id}", status_code=204)
async def delete_swarm(session_id: str):
    _get_runner(session_id)
    del sessions[session_id]
    return Response(status_code=204)


@app.post("/api/landmarks/upload", response_model=List[Landmark])
async def upload_landmarks(file: UploadFile = File(...)):
    return await process_landmark_file(file)


@app.post("/api/optimize", response_model=OptimizeResponse)
async def optimize_endpoint(request: OptimizeRequest):
    if request.iterations < 0:
        raise InvalidConfiguration(f"iterations must be non-negative, got {request.iterations}")

    # Initialize & run
    runner = SwarmRunner(Swarm(request.config).initialize(), max_iter=request.iterations)
    runner.run()
    report = generate_swarm_report(runner)

    return OptimizeResponse(
        global_best=report['global_best'],
        particles=report['particles'],
        convergence_summary=report['convergence_summary'],
        history=report['history']
    )


if __name__ == '__main__':
    import uvicorn
    uvicorn.run(app, host='0.0.0.0', port=8000)
