import logging

logger = logging.getLogger(__name__)


class SwarmRunner:
    """
    Drives a swarm tick by tick with an optional iteration cap

    History holds the global best score after every tick and lives only as
    long as the runner.
    """

    def __init__(self, swarm, max_iter=None):
        if max_iter is not None and max_iter < 0:
            raise ValueError(f"max_iter must be non-negative, got {max_iter}")
        self.swarm = swarm
        self.max_iter = max_iter
        self.iteration = 0
        self.history = []
        self.initial_best_score = None
        self._stopped = False
        if swarm.particles:
            self.initial_best_score = swarm.global_best_score

    @property
    def exhausted(self) -> bool:
        return self.max_iter is not None and self.iteration >= self.max_iter

    @property
    def stopped(self) -> bool:
        return self._stopped

    def stop(self):
        self._stopped = True

    def tick(self) -> bool:
        if self._stopped or self.exhausted:
            return False
        if self.initial_best_score is None:
            self.swarm.initialize()
            self.initial_best_score = self.swarm.global_best_score

        self.swarm.step()
        self.iteration += 1
        self.history.append(self.swarm.global_best_score)
        logger.debug(
            "Iteration %d: best score %.6f", self.iteration, self.swarm.global_best_score
        )
        return True

    def run(self, iterations=None) -> int:
        """
        Tick until `iterations` ticks ran, the cap is reached or stop() is called

        Returns:
        Number of ticks actually performed
        """
        if iterations is None and self.max_iter is None:
            raise ValueError("run() needs an iteration count when the runner has no max_iter")

        logger.info("Starting PSO run at iteration %d", self.iteration)
        done = 0
        while iterations is None or done < iterations:
            if not self.tick():
                break
            done += 1

        logger.info(
            "PSO run finished: %d ticks, iteration %d, best score %.6f",
            done, self.iteration, self.swarm.global_best_score,
        )
        return done

    def reset(self):
        self.swarm.reset()
        self.iteration = 0
        self.history = []
        self.initial_best_score = self.swarm.global_best_score
        self._stopped = False
        return self
