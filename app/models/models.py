from enum import Enum
from typing import List, Dict, Any, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field


class InertiaMode(str, Enum):
    DECAY = "decay"
    CONSTANT = "constant"


class UpdatePolicy(str, Enum):
    SYNCHRONOUS = "synchronous"
    ASYNCHRONOUS = "asynchronous"


class SwarmStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"


class Landmark(BaseModel):
    x: float
    y: float
    name: Optional[str] = None


class SwarmConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    particle_count: int = 30
    inertia_weight: float = 0.5
    inertia_mode: InertiaMode = InertiaMode.DECAY
    inertia_decay: float = 0.99
    inertia_floor: float = 0.4
    cognitive_weight: float = 2.0
    social_weight: float = 2.0
    max_velocity: float = 2.0
    max_position: float = 100.0
    update_policy: UpdatePolicy = UpdatePolicy.SYNCHRONOUS
    objective: str = "rastrigin"
    landmarks: List[Landmark] = Field(default_factory=list)
    seed: Optional[int] = None


class ParticleState(BaseModel):
    position: Tuple[float, float]
    velocity: Tuple[float, float]
    best_position: Tuple[float, float]
    best_score: float
    score: float


class GlobalBest(BaseModel):
    position: Optional[Tuple[float, float]] = None
    score: Optional[float] = None


class SwarmSnapshot(BaseModel):
    status: SwarmStatus
    particles: List[ParticleState]
    global_best: GlobalBest


class CreateSwarmRequest(BaseModel):
    config: SwarmConfig = Field(default_factory=SwarmConfig)
    max_iter: Optional[int] = None


class SwarmSessionResponse(BaseModel):
    session_id: str
    iteration: int
    max_iter: Optional[int]
    stopped: bool
    snapshot: SwarmSnapshot


class OptimizeRequest(BaseModel):
    config: SwarmConfig = Field(default_factory=SwarmConfig)
    iterations: int = 500


class OptimizeResponse(BaseModel):
    global_best: Dict[str, Any]
    particles: List[Dict[str, Any]]
    convergence_summary: Dict[str, float]
    history: List[float]
