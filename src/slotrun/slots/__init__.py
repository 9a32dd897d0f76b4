"""
Instruction sets and their slots: identifier expressions, the slot
extraction protocol and the filesystem repository.
"""

from slotrun.slots.document import SlotBlock, SlotDocument, extract_slot
from slotrun.slots.ids import parse_id, resolve_ids
from slotrun.slots.repository import (
    InstructionSetRepository,
    normalize_set_name,
    sanitize_set_name,
)

__all__ = [
    "InstructionSetRepository",
    "SlotBlock",
    "SlotDocument",
    "extract_slot",
    "normalize_set_name",
    "parse_id",
    "resolve_ids",
    "sanitize_set_name",
]
