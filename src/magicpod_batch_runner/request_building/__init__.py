"""Request building exports."""

from .batch_run_payload import SHARED_DATA_PATTERN_KEY, build_batch_run_payload

__all__ = ["SHARED_DATA_PATTERN_KEY", "build_batch_run_payload"]
