"""Slot activation strategies: copying, swapping via scratch, or executing in place."""

__all__ = ["base", "copy", "swap_sabs", "swap_scootch", "xip"]