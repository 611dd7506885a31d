"""Structural description of an encoded frame, for diagnostics."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field


@dataclass
class BlockInfo:
    """One overhead-prefixed block of a frame."""

    overhead: int
    literal_count: int = 0
    sentinel_follows: bool = False

    @property
    def full(self) -> bool:
        return self.overhead == 0xFF

    @property
    def complete(self) -> bool:
        """True if every literal byte announced by the overhead was present."""
        return self.literal_count == self.overhead - 1


@dataclass
class FrameReport:
    """Block-by-block walk of a candidate frame.

    ``terminated`` is set when a 0x00 was read in place of an overhead
    byte. ``truncated`` means the input ended inside a block.
    ``trailing_bytes`` counts input left after the sentinel.
    """

    length: int
    blocks: list[BlockInfo] = field(default_factory=list)
    terminated: bool = False
    truncated: bool = False
    trailing_bytes: int = 0

    @property
    def decoded_size(self) -> int:
        """Bytes the unstuffing step yields, checksum byte included."""
        return sum(b.literal_count for b in self.blocks) + sum(
            1 for b in self.blocks if b.sentinel_follows
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["decoded_size"] = self.decoded_size
        return data

    def __repr__(self) -> str:
        overheads = " ".join(f"{b.overhead:02X}" for b in self.blocks)
        return (
            f"FrameReport(length={self.length}, "
            f"blocks=[{overheads or '(none)'}], "
            f"terminated={self.terminated}, truncated={self.truncated})"
        )
