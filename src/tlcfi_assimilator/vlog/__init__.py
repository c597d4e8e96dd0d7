"""V-Log 3 output."""

from tlcfi_assimilator.vlog.encoder import VlogEncoder, change_messages, time_reference, to_vlog, vlog_info

__all__ = [
    "VlogEncoder",
    "change_messages",
    "time_reference",
    "to_vlog",
    "vlog_info",
]
