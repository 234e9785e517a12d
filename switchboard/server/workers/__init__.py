from .slot_selector import SlotSelector as SlotSelector
from .worker import Worker as Worker
from .worker_pool import WorkerPool as WorkerPool
from .worker_range import WorkerRange as WorkerRange
