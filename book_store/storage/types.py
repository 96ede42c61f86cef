from __future__ import annotations

from dataclasses import dataclass

U64_MAX = 2**64 - 1


@dataclass
class CellRow:
    memory_id: int
    value: bytes


@dataclass
class EntryRow:
    memory_id: int
    key: bytes
    value: bytes


def encode_u64(value: int) -> bytes:
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"value out of uint64 range: {value}")
    return value.to_bytes(8, "big")


def decode_u64(raw: bytes) -> int:
    if len(raw) != 8:
        raise ValueError(f"expected 8 bytes, got {len(raw)}")
    return int.from_bytes(raw, "big")
