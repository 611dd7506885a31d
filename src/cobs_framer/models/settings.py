"""Framer settings model."""

from __future__ import annotations

from dataclasses import dataclass

from ..protocol.framing import MAX_FRAME_SIZE

# Smallest possible frame: overhead byte, checksum-derived block, sentinel
MIN_FRAME_SIZE = 3


@dataclass
class FramerSettings:
    """Limits applied by a sender before handing frames to the transport."""

    max_frame_size: int = MAX_FRAME_SIZE

    def validate(self) -> None:
        if self.max_frame_size < MIN_FRAME_SIZE:
            raise ValueError(
                f"max_frame_size must be at least {MIN_FRAME_SIZE}, "
                f"got {self.max_frame_size}"
            )

    @property
    def max_payload_size(self) -> int:
        """Largest payload accepted, leaving room for the checksum byte."""
        return self.max_frame_size - 1

    def to_dict(self) -> dict:
        return {
            "max_frame_size": self.max_frame_size,
            "max_payload_size": self.max_payload_size,
        }

    @classmethod
    def from_dict(cls, data: dict) -> FramerSettings:
        settings = cls(max_frame_size=int(data.get("max_frame_size", MAX_FRAME_SIZE)))
        settings.validate()
        return settings
