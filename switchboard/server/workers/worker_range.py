from __future__ import annotations

from switchboard.exceptions import WorkerRangeError


class WorkerRange:
    """
    The slots a server cycles through, `lo` to `hi` inclusive. Slot 1
    (and anything below it) is the intake thread itself, every slot
    above 1 is a pooled worker. A lower bound below 1 adds inline
    turns to each cycle, biasing work toward the intake thread.

    A single value (`"1"`, `4`) never pools.
    """

    __slots__ = ("lo", "hi", "pooled")

    def __init__(self, lo: int, hi: int, pooled: bool = True) -> None:
        if hi < lo:
            raise WorkerRangeError(f"Err. - worker range upper bound {hi} is below lower bound {lo}")

        self.lo = lo
        self.hi = hi
        self.pooled = pooled and hi > 1

    @classmethod
    def parse(cls, value: WorkerRange | str | int | range | tuple[int, int]) -> WorkerRange:
        if isinstance(value, WorkerRange):
            return value

        if isinstance(value, bool):
            raise WorkerRangeError(f"Err. - invalid worker range {value!r}")

        if isinstance(value, int):
            return cls(value, value, pooled=False)

        if isinstance(value, range):
            if value.step != 1 or len(value) == 0:
                raise WorkerRangeError(f"Err. - worker range must be a non-empty step-1 range, got {value!r}")

            return cls(value.start, value.stop - 1)

        if isinstance(value, tuple) and len(value) == 2:
            lo, hi = value
            return cls(
                cls._to_bound(lo, value),
                cls._to_bound(hi, value),
            )

        if not isinstance(value, str):
            raise WorkerRangeError(f"Err. - unsupported worker range type {type(value).__name__}")

        bounds = value.strip().split(':')

        match bounds:
            case [single]:
                bound = cls._to_bound(single, value)
                return cls(bound, bound, pooled=False)

            case [lo, hi]:
                return cls(
                    cls._to_bound(lo, value),
                    cls._to_bound(hi, value),
                )

            case _:
                raise WorkerRangeError(f"Err. - worker range must be 'N' or 'lo:hi', got {value!r}")

    @staticmethod
    def _to_bound(bound: str | int, value: object) -> int:
        if isinstance(bound, bool):
            raise WorkerRangeError(f"Err. - invalid worker range bound in {value!r}")

        try:
            return int(bound)

        except (TypeError, ValueError):
            raise WorkerRangeError(f"Err. - invalid worker range bound {bound!r} in {value!r}")

    @property
    def slots(self) -> range:
        return range(self.lo, self.hi + 1)

    @property
    def worker_slots(self) -> list[int]:
        if not self.pooled:
            return []

        return [slot for slot in self.slots if slot > 1]

    @property
    def inline_turns(self) -> int:
        """Slots per cycle that run on the intake thread."""
        if not self.pooled:
            return 1

        return len([slot for slot in self.slots if slot <= 1])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WorkerRange):
            return NotImplemented

        return (self.lo, self.hi, self.pooled) == (other.lo, other.hi, other.pooled)

    def __repr__(self) -> str:
        if self.pooled:
            return f"{type(self).__name__}({self.lo}:{self.hi})"

        return f"{type(self).__name__}({self.lo}, pooled=False)"
