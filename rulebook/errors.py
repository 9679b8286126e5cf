class InvariantViolation(RuntimeError):
    """Internal state was consulted before it was valid (stale totals, missing evasion)."""


class UnknownActionError(KeyError):
    """The source entity does not own the action a check was asked to use."""

    def __init__(self, source_id: str, action_slug: str):
        super().__init__(f"{source_id!r} has no action {action_slug!r}")
        self.source_id = source_id
        self.action_slug = action_slug
