"""Protocol layer: record framing, command builders, and response parsing."""

from .framing import build_record, parse_record, read_sample_frame
from .commands import Command
