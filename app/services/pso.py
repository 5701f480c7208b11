import logging
import math

import numpy as np
from pydantic import ValidationError

from app.exceptions import InvalidConfiguration, SwarmNotInitialized
from app.models.models import (
    GlobalBest,
    InertiaMode,
    ParticleState,
    SwarmConfig,
    SwarmSnapshot,
    SwarmStatus,
    UpdatePolicy,
)
from app.models.particle import Particle
from app.services.objectives import build_objective

logger = logging.getLogger(__name__)


def coerce_config(config) -> SwarmConfig:
    """Accept a SwarmConfig or a plain dict and validate it."""
    if isinstance(config, SwarmConfig):
        validated = config
    else:
        try:
            validated = SwarmConfig(**(config or {}))
        except ValidationError as e:
            raise InvalidConfiguration(f"Malformed swarm configuration: {e}") from e
    validate_config(validated)
    return validated


def validate_config(config: SwarmConfig):
    if config.particle_count < 1:
        raise InvalidConfiguration(
            f"particle_count must be at least 1, got {config.particle_count}"
        )

    non_negative = ("inertia_weight", "inertia_floor", "cognitive_weight", "social_weight")
    positive = ("inertia_decay", "max_velocity", "max_position")

    for name in non_negative + positive:
        value = getattr(config, name)
        if not math.isfinite(value):
            raise InvalidConfiguration(f"{name} must be finite, got {value}")
    for name in non_negative:
        if getattr(config, name) < 0:
            raise InvalidConfiguration(f"{name} must be non-negative, got {getattr(config, name)}")
    for name in positive:
        if getattr(config, name) <= 0:
            raise InvalidConfiguration(f"{name} must be positive, got {getattr(config, name)}")


def inertia_factor(config: SwarmConfig) -> float:
    """
    Inertia applied on the current tick

    Decay mode recomputes max(floor, weight * decay) from the configured weight
    each tick, so the factor never compounds across ticks.
    """
    if config.inertia_mode == InertiaMode.CONSTANT:
        return config.inertia_weight
    return max(config.inertia_floor, config.inertia_weight * config.inertia_decay)


class Swarm:
    def __init__(self, config, objective=None, rng=None):
        """
        Build an uninitialized swarm

        Parameters:
        config: SwarmConfig or dict with the swarm parameters
        objective: Optional objective overriding the one named in config
        rng: Optional numpy Generator; defaults to one seeded with config.seed
        """
        self.config = coerce_config(config)
        self.objective = objective if objective is not None else build_objective(self.config)
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)

        self.particles = []
        self.global_best_position = None
        self.global_best_score = math.inf

    @property
    def state(self) -> SwarmStatus:
        if self.particles:
            return SwarmStatus.RUNNING
        return SwarmStatus.UNINITIALIZED

    def initialize(self):
        """Discard all particles and globals and rebuild them from configuration."""
        self.particles = [
            Particle.spawn(self.config, self.objective, self.rng)
            for _ in range(self.config.particle_count)
        ]

        best = min(self.particles, key=lambda p: p.best_score)
        self.global_best_position = best.best_position.copy()
        self.global_best_score = best.best_score

        logger.info(
            "Initialized swarm: %d particles, objective=%s, best score %.4f",
            len(self.particles), self.objective.name, self.global_best_score,
        )
        return self

    reset = initialize

    def _commit_best(self, particle) -> bool:
        if particle.best_score < self.global_best_score:
            self.global_best_score = particle.best_score
            self.global_best_position = particle.best_position.copy()
            return True
        return False

    def step(self):
        """
        Advance the swarm by one tick

        Synchronous policy: every particle chases the global best as it was at
        the start of the tick. Asynchronous policy: improvements are visible to
        the particles that move later in the same tick.
        """
        if not self.particles:
            raise SwarmNotInitialized()

        w = inertia_factor(self.config)
        asynchronous = self.config.update_policy == UpdatePolicy.ASYNCHRONOUS
        leader_position = self.global_best_position.copy()

        for particle in self.particles:
            if asynchronous:
                leader_position = self.global_best_position
            improved = particle.update(leader_position, w, self.config, self.objective, self.rng)
            if asynchronous and improved:
                self._commit_best(particle)

        best = min(self.particles, key=lambda p: p.best_score)
        if self._commit_best(best):
            logger.debug("Global best improved to %.6f", self.global_best_score)
        return self

    def snapshot(self) -> SwarmSnapshot:
        particles = [
            ParticleState(
                position=tuple(p.position.tolist()),
                velocity=tuple(p.velocity.tolist()),
                best_position=tuple(p.best_position.tolist()),
                best_score=p.best_score,
                score=p.score,
            )
            for p in self.particles
        ]
        if self.global_best_position is None:
            global_best = GlobalBest()
        else:
            global_best = GlobalBest(
                position=tuple(self.global_best_position.tolist()),
                score=self.global_best_score,
            )
        return SwarmSnapshot(status=self.state, particles=particles, global_best=global_best)


def initialize(config, rng=None) -> Swarm:
    return Swarm(config, rng=rng).initialize()


def step(swarm: Swarm) -> Swarm:
    return swarm.step()


def reset(config, rng=None) -> Swarm:
    return initialize(config, rng=rng)
