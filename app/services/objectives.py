import logging

import numpy as np

from app.exceptions import EmptyLandmarkSet, InvalidConfiguration

logger = logging.getLogger(__name__)


class Objective:
    """Scalar fitness over a 2-D position; lower is better."""

    name = "objective"

    def evaluate(self, position) -> float:
        raise NotImplementedError

    def __call__(self, position) -> float:
        return self.evaluate(position)


class RastriginObjective(Objective):
    """
    Rastrigin function in two dimensions

    score = 20 + sum(p^2 - 10 cos(2 pi p)) over both axes.
    Global minimum of 0 at the origin, surrounded by a grid of local minima.
    """

    name = "rastrigin"

    def evaluate(self, position) -> float:
        p = np.asarray(position, dtype=float)
        return float(10 * 2 + np.sum(p * p - 10 * np.cos(2 * np.pi * p)))


class LandmarkObjective(Objective):
    """
    Mean euclidean distance from a position to every landmark

    Landmarks may be moved between ticks; every evaluation reads the
    current set.
    """

    name = "landmarks"

    def __init__(self, landmarks):
        self._landmarks = self._as_array(landmarks)

    @staticmethod
    def _as_point(position) -> np.ndarray:
        point = np.asarray(position, dtype=float)
        if point.shape != (2,):
            raise InvalidConfiguration(
                f"Landmark must be an (x, y) pair, got shape {point.shape}"
            )
        if not np.all(np.isfinite(point)):
            raise InvalidConfiguration("Landmark coordinates must be finite")
        return point

    @classmethod
    def _as_array(cls, landmarks) -> np.ndarray:
        points = []
        for landmark in landmarks:
            if hasattr(landmark, "x"):
                landmark = (landmark.x, landmark.y)
            points.append(cls._as_point(landmark))
        if not points:
            raise EmptyLandmarkSet()
        return np.array(points, dtype=float)

    @property
    def landmarks(self) -> np.ndarray:
        return self._landmarks.copy()

    def set_landmarks(self, landmarks):
        self._landmarks = self._as_array(landmarks)
        logger.debug("Landmark set replaced (%d landmarks)", len(self._landmarks))

    def move_landmark(self, index: int, position):
        count = len(self._landmarks)
        if not 0 <= index < count:
            raise InvalidConfiguration(
                f"Landmark index {index} out of range for {count} landmarks"
            )
        self._landmarks[index] = self._as_point(position)

    def add_landmark(self, position):
        point = self._as_point(position)
        self._landmarks = np.vstack([self._landmarks, point])

    def evaluate(self, position) -> float:
        p = np.asarray(position, dtype=float)
        distances = np.linalg.norm(self._landmarks - p, axis=1)
        return float(np.mean(distances))


OBJECTIVES = {
    RastriginObjective.name: RastriginObjective,
    LandmarkObjective.name: LandmarkObjective,
}


def build_objective(config) -> Objective:
    """Instantiate the objective selected by config.objective."""
    if config.objective == RastriginObjective.name:
        return RastriginObjective()
    if config.objective == LandmarkObjective.name:
        return LandmarkObjective(config.landmarks)
    raise InvalidConfiguration(
        f"Unknown objective '{config.objective}'",
        f"available objectives: {', '.join(sorted(OBJECTIVES))}",
    )
