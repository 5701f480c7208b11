import os


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


# Service settings (engine parameters live in SwarmConfig)
LOG_LEVEL = os.getenv("PSO_LOG_LEVEL", "INFO").upper()
DEFAULT_MAX_ITER = _env_int("PSO_DEFAULT_MAX_ITER", 500)
MAX_TICKS_PER_REQUEST = _env_int("PSO_MAX_TICKS_PER_REQUEST", 1000)
MAX_SESSIONS = _env_int("PSO_MAX_SESSIONS", 64)
