"""Per-plugin outcomes and the aggregate scan result."""

from dataclasses import dataclass, field
from typing import Any, Literal

OutcomeStatus = Literal["loaded", "skipped", "failed"]


@dataclass
class PluginOutcome:
    """What happened to one plugin (or extension) during boot."""

    name: str
    status: OutcomeStatus
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status != "failed"


@dataclass
class LoadResult:
    """Result of a full plugin scan."""

    loaded: list[str] = field(default_factory=list)
    elapsed: float = 0.0
    outcomes: list[PluginOutcome] = field(default_factory=list)
    providers: dict[str, Any] = field(default_factory=dict)

    @property
    def plugin_count(self) -> int:
        return len(self.loaded)

    @property
    def failures(self) -> list[PluginOutcome]:
        return [o for o in self.outcomes if o.status == "failed"]


class PluginBootError(Exception):
    """Raised when a plugin fails to load or boot under the fail_fast policy."""

    def __init__(self, plugin: str, cause: BaseException) -> None:
        self.plugin = plugin
        self.cause = cause
        super().__init__(f"Plugin '{plugin}' failed to boot: {describe_error(cause)}")


def describe_error(error: BaseException) -> str:
    """One-line description of an exception for outcome records and logs."""
    return f"{type(error).__name__}: {error}"


def summarize_failures(outcomes: list[PluginOutcome]) -> str:
    """Join failed outcomes into a single report line."""
    return "; ".join(f"{o.name} ({o.error})" for o in outcomes if o.status == "failed")
