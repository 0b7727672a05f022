class LifecycleError(Exception):
    pass


class StageNotFoundError(LifecycleError):
    pass


class RuleNotFoundError(LifecycleError):
    pass


class SimulationEnvironmentNotFoundError(LifecycleError):
    pass


class RuleValidationError(LifecycleError):
    def __init__(self, errors: list[str]) -> None:
        super().__init__("RULE_VALIDATION_FAILED: " + "; ".join(errors))
        self.errors = errors
