"""Data models for framer settings and frame diagnostics."""

from .report import BlockInfo, FrameReport
from .settings import FramerSettings
