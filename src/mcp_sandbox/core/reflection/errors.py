"""Error types for the reflection layer."""


class ReflectionError(Exception):
    """A module could not be located, loaded, or finished loading in time."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Failed to reflect module" + (f": {detail}" if detail else ""))
