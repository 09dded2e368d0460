"""Per-operation outcome used where a batch must not stop on one failure."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Result:
    """Outcome of one unit of work inside a batch.

    Evaluates truthy on success and unpacks as ``(success, message)``.
    *subject* identifies what the work was about (a user id for a
    delivery), *error* keeps the exception of a failed attempt.

    Examples::

        r = Result.fail("blocked DMs", subject=42, error=exc)
        if not r:
            log(r.subject, r.message)

        ok, msg = Result.ok(subject=42)
    """

    success: bool
    message: str = ""
    subject: Any = None
    error: BaseException | None = field(default=None, repr=False, compare=False)

    @classmethod
    def ok(cls, message: str = "", *, subject: Any = None) -> Result:
        return cls(success=True, message=message, subject=subject)

    @classmethod
    def fail(
        cls,
        message: str = "",
        *,
        subject: Any = None,
        error: BaseException | None = None,
    ) -> Result:
        return cls(success=False, message=message, subject=subject, error=error)

    def __bool__(self) -> bool:
        return self.success

    def __iter__(self):
        yield self.success
        yield self.message
