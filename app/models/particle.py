import numpy as np


class Particle:
    def __init__(self, position, velocity, objective):
        # Position and velocity
        self.position = np.array(position, dtype=float)
        self.velocity = np.array(velocity, dtype=float)
        # Personal best
        self.score = objective(self.position)
        self.best_position = self.position.copy()
        self.best_score = self.score

    @classmethod
    def spawn(cls, config, objective, rng):
        position = rng.uniform(-config.max_position, config.max_position, 2)
        velocity = rng.uniform(-config.max_velocity, config.max_velocity, 2)
        return cls(position, velocity, objective)

    def update_velocity(self, leader_pos, w: float, c1: float, c2: float,
                        r1: float, r2: float, max_velocity: float):
        # r1 and r2 are shared by both axes
        self.velocity = (
            w * self.velocity
            + c1 * r1 * (self.best_position - self.position)
            + c2 * r2 * (leader_pos - self.position)
        )
        self.velocity = np.clip(self.velocity, -max_velocity, max_velocity)

    def update_position(self, max_position: float):
        self.position = np.clip(self.position + self.velocity, -max_position, max_position)

    def evaluate(self, objective) -> bool:
        """Score the current position; returns True if the personal best improved."""
        self.score = objective(self.position)
        if self.score < self.best_score:
            self.best_score = self.score
            self.best_position = self.position.copy()
            return True
        return False

    def update(self, global_best_position, inertia_factor: float, config, objective, rng) -> bool:
        r1, r2 = rng.random(2)
        self.update_velocity(
            global_best_position,
            w=inertia_factor,
            c1=config.cognitive_weight,
            c2=config.social_weight,
            r1=r1,
            r2=r2,
            max_velocity=config.max_velocity,
        )
        self.update_position(config.max_position)
        return self.evaluate(objective)
