# ndarray_shm/_internal/json_builder.py

"""
Internal functions to encode and decode the JSON record that identifies a
shared array across a process boundary.

This module decouples the descriptor dataclass from the specific JSON layout
exchanged with worker processes, making future format changes easier to
manage.
"""

import json
from typing import Any, TypeAlias

from ..dataclasses import ArrayDescriptor
from ..exceptions import InvalidArgumentError
from ..types import Order

# TypeAlias for clarity in function signatures.
JsonRecord: TypeAlias = dict[str, Any]

NDARRAY_TYPE = "ndarray"
SHM_TYPE = "shm"

def build_ndarray_record(desc: ArrayDescriptor) -> JsonRecord:
    """Builds the record for one array. Extents are always written in C order."""
    shape = list(desc.shape) if desc.order is Order.C_ORDER else list(reversed(desc.shape))
    return {
        "appose_type": NDARRAY_TYPE,
        "dtype": desc.dtype.label,
        "shape": shape,
        "order": Order.C_ORDER.numpy_order,
        "shm": {
            "appose_type": SHM_TYPE,
            "name": desc.shm_name,
            "rsize": desc.rsize,
        },
    }

def parse_ndarray_record(record: JsonRecord) -> ArrayDescriptor:
    """
    Converts a record built by `build_ndarray_record` back to a descriptor.

    Raises:
        InvalidArgumentError: If the record is not an ndarray record.
    """
    if not isinstance(record, dict) or record.get("appose_type") != NDARRAY_TYPE:
        raise InvalidArgumentError(f"Not an ndarray record: {record!r}")
    shm = record.get("shm")
    if not isinstance(shm, dict) or shm.get("appose_type") != SHM_TYPE:
        raise InvalidArgumentError(f"ndarray record has no shm entry: {record!r}")
    return ArrayDescriptor.from_dict({
        "dtype": record.get("dtype"),
        "shape": record.get("shape"),
        "order": record.get("order", "C"),
        "shm_name": shm.get("name"),
        "rsize": shm.get("rsize"),
    })

def encode_descriptor(desc: ArrayDescriptor) -> str:
    """Serializes a descriptor to compact JSON."""
    # Using compact separators keeps the record small
    return json.dumps(build_ndarray_record(desc), separators=(',', ':'))

def decode_descriptor(data: str | bytes) -> ArrayDescriptor:
    """
    Parses JSON produced by `encode_descriptor`.

    Raises:
        InvalidArgumentError: If the text is not valid JSON or not an
            ndarray record.
    """
    try:
        record = json.loads(data)
    except (json.JSONDecodeError, TypeError, UnicodeDecodeError) as e:
        raise InvalidArgumentError(f"Invalid ndarray JSON: {e}") from e
    return parse_ndarray_record(record)
