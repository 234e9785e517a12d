from .worker_range import WorkerRange


class SlotSelector:
    """
    Cyclic counter deciding, packet by packet, where work runs. Starts
    one below `lo`, advances by one per packet and wraps from past
    `hi` back to `lo`.
    """

    __slots__ = ("lo", "hi", "current")

    def __init__(self, worker_range: WorkerRange) -> None:
        self.lo = worker_range.lo
        self.hi = worker_range.hi
        self.current = self.lo - 1

    def next(self) -> int:
        self.current += 1
        if self.current > self.hi:
            self.current = self.lo

        return self.current

    @staticmethod
    def is_inline(slot: int) -> bool:
        return slot <= 1
