"""Domain exceptions raised by the form services."""


class FormNavigationError(Exception):
    """Base class for invalid form navigation requests."""


class StepOutOfRangeError(FormNavigationError):
    """Requested step does not exist in the form."""

    def __init__(self, step: int, total_steps: int):
        self.step = step
        self.total_steps = total_steps
        super().__init__(f"Step {step} is out of range (0-{total_steps - 1})")


class InvalidAcknowledgementError(FormNavigationError):
    """Gaps were acknowledged on a step that has no history analysis."""

    def __init__(self, step: int):
        self.step = step
        super().__init__(f"Step {step} has no history gaps to acknowledge")


class FormStoreUnavailableError(Exception):
    """Form progress storage could not be reached."""
