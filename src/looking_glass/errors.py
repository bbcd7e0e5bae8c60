"""
Exception hierarchy for looking-glass.

Two failure families exist:

1.  :class:`UnavailableStructureError`: an internal structure cannot be read
    (absent, wrong shape, access denied). Callers contain it locally and return
    an empty or unknown answer for that one query unit.
2.  :class:`MalformedStateError`: an invariant the walkers rely on is violated.
    This is surfaced to the caller and names the offending subject.
"""

from typing import Any, Optional


class LookingGlassError(Exception):
  """Base class for all looking-glass errors."""


class UnavailableStructureError(LookingGlassError):
  """Raised when runtime-internal storage cannot be read."""


class MalformedStateError(LookingGlassError):
  """
  Raised when runtime-internal state has an unexpected representation.

  Attributes:
      subject (Any): The callable or namespace whose state was being read.
  """

  def __init__(self, message: str, subject: Optional[Any] = None):
    """
    Initializes the error.

    Args:
        message (str): Description of the violated invariant.
        subject (Any, optional): The callable or namespace being inspected.
    """
    self.subject = subject
    if subject is not None:
      message = f"{message} (while inspecting {subject!r})"
    super().__init__(message)
