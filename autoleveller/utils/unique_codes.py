"""Monotonic allocator for subroutine numbers and global variable numbers."""
from typing import Optional

# Starting points used by a generation session
SUBROUTINE_CODES_START = 1
GLOBAL_VARIABLES_START = 100
# Global variables must stay below the probe value table at #500
GLOBAL_VARIABLES_STOP = 499


class UniqueCodes:
    """
    Hand out strictly increasing integer codes.

    The generated program addresses subroutines and numbered variables by
    literals baked into the text, so a code must never be handed out twice.
    Use ``next(codes)`` or ``codes.get_unique_code()``.

    Args:
        start: First code to hand out
        stop: Optional last code available (inclusive)
    """

    def __init__(self, start: int, stop: Optional[int] = None):
        self.start = start
        self.stop = stop
        self._next = start

    def __iter__(self):
        return self

    def __next__(self) -> int:
        return self.get_unique_code()

    def get_unique_code(self) -> int:
        """
        Reserve and return the next code.

        Raises:
            RuntimeError: If the range up to ``stop`` is used up
        """
        if self.stop is not None and self._next > self.stop:
            raise RuntimeError(f"Code range {self.start}-{self.stop} exhausted")
        code = self._next
        self._next += 1
        return code

    @property
    def issued(self) -> int:
        """Number of codes handed out so far."""
        return self._next - self.start
