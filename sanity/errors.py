"""Exception hierarchy for module loading and cycle execution."""

from __future__ import annotations


class SanityError(Exception):
    """Base class for all sanity errors."""


class ModuleLoadError(SanityError):
    """Raised when a module definition is malformed, duplicated or unimportable."""

    def __init__(self, source: str | None, reason: str) -> None:
        self.source = source
        self.reason = reason
        where = f'Module("{source}")' if source else "Module(dict)"
        super().__init__(f"{where} - {reason}")


class EmptyRegistryError(SanityError):
    """Raised when a cycle is requested with no modules registered."""

    def __init__(self) -> None:
        super().__init__("No sanity modules to run")


class MalformedResultError(SanityError):
    """Raised when a handler returns something other than a string or mapping."""

    def __init__(self, module_id: str, value: object) -> None:
        self.module_id = module_id
        super().__init__(
            f'Unrecognised response for "{module_id}" module report: '
            f"got {type(value).__name__}, expected str, list[str] or mapping"
        )


class SanityConfigError(SanityError):
    """Raised when the environment cannot be loaded (paths, require files)."""
