class PyRMPExceptionBase(Exception): ...


# Configuration Errors
class InvalidConfiguration(PyRMPExceptionBase, ValueError):
    """Raised when a profile, constraint set or planner call is configured with values that
    cannot produce a valid motion (e.g. non-positive limits or control periods)."""
