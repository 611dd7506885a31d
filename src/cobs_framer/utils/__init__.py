"""Shared helpers."""

from .checksum import xor_checksum
