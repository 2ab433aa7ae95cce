"""Plan catalogue exceptions."""


class PlanNotFoundError(Exception):
    """Raised when a deposit references a plan that does not exist."""
