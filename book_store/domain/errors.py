"""Error taxonomy of the book store.

``NotFoundError`` is the only error callers are expected to handle. Every
``StorageFault`` means the stored state or a storage contract is broken; the
running operation is rolled back and the fault propagates to the host.
"""

from __future__ import annotations


class BookStoreError(Exception):
    """Base class for all book store errors."""


class NotFoundError(BookStoreError):
    def __init__(self, msg: str):
        super().__init__(msg)
        self.msg = msg


class PayloadTooLargeError(BookStoreError):
    def __init__(self, size: int, max_size: int):
        super().__init__(f"book payload encodes to {size} bytes, limit is {max_size}")
        self.size = size
        self.max_size = max_size


class StorageFault(BookStoreError):
    """Unrecoverable storage contract violation."""


class CodecError(StorageFault):
    pass


class RecordTooLargeError(StorageFault):
    def __init__(self, size: int, max_size: int):
        super().__init__(f"encoded record is {size} bytes, exceeds bound of {max_size}")
        self.size = size
        self.max_size = max_size


class CounterOverflowError(StorageFault):
    pass
