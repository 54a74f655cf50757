"""Engine exceptions. Gameplay rejections are outcomes, not exceptions."""


class EngineError(Exception):
    """Base error for the rules engine."""

    def __init__(self, message: str, code: str):
        self.code = code
        super().__init__(message)


class NoEntryNodeError(EngineError):
    """A run cannot start because the circuit has no level 0 node."""

    def __init__(self, circuit_id: str):
        self.circuit_id = circuit_id
        super().__init__(f"No entry node (level 0) in circuit {circuit_id}", "NO_ENTRY_NODE")


class RunStateValidationError(EngineError):
    """A stored run-state document is malformed."""

    def __init__(self, errors: list[dict]):
        self.errors = errors
        super().__init__(
            f"Run state validation failed with {len(errors)} error(s)",
            "INVALID_RUN_STATE",
        )
