"""Internal constants shared across the library."""

# ------------------------------------------------------------------
# TLC-FI clock
# ------------------------------------------------------------------

MAX_TICK = 4_294_967_295  # 2**32 - 1
# A backwards jump is only an overflow when the previous tick was this close
# to MAX_TICK; anything else is a controller reset.
OVERFLOW_WINDOW_MS = 5_000

# TLC-FI ``objects.type`` discriminators.
TLCFI_TYPE_SIGNAL = 3
TLCFI_TYPE_DETECTOR = 4

# ------------------------------------------------------------------
# V-Log 3 records
# ------------------------------------------------------------------

MSG_TIME_REFERENCE = 0x01
MSG_VLOG_INFO = 0x04
MSG_DETECTOR_CHANGE = 0x06
MSG_SIGNAL_CHANGE = 0x0E

VLOG_VERSION = "030000"
TLC_NAME_UNITS = 20
TLC_NAME_PAD = 0x20  # ASCII space

MS_PER_DECISECOND = 100
TIME_REFERENCE_INTERVAL_MS = 300_000
MAX_ENTRIES_PER_RECORD = 10

MAX_DELTA_DS = 0xFFF  # 3 hex digits
MAX_ENTRY_COUNT = 0xF  # 1 hex digit
MAX_VLOG_ID = 254
