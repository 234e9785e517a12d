class OutputBuffer:
    """
    Staging area for replies produced by a job running on a worker.
    Written by exactly one worker, drained by the intake thread once
    the job has finished.

    `written` records that a reply was staged at all, so a job that
    responds with an empty payload still produces an (empty) datagram.
    """

    __slots__ = ("_buffer", "_written")

    def __init__(self) -> None:
        self._buffer = bytearray()
        self._written = False

    def __len__(self):
        return len(self._buffer)

    @property
    def empty(self) -> bool:
        return len(self._buffer) == 0

    @property
    def written(self) -> bool:
        return self._written

    def write(self, data: bytes):
        self._buffer.extend(data)
        self._written = True

    def flush(self) -> bytes:
        data = bytes(self._buffer)
        self.clear()

        return data

    def clear(self):
        self._buffer.clear()
        self._written = False
