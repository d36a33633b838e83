"""
Positional mapping of decoded rows onto record types.
"""

import logging
from typing import Iterable, List, Type, TypeVar

from ..models.records import DeviceRecord, ProcessRecord, RawRow
from ..validation import SchemaMismatchError, handle_parse_error

logger = logging.getLogger(__name__)

R = TypeVar("R", DeviceRecord, ProcessRecord)


def _map_rows(rows: Iterable[RawRow], record_type: Type[R]) -> List[R]:
    """
    Build one record per row, field i of the row feeding the i-th record field.

    The row length is checked against the record's field count first, so a
    query whose kind does not match the record type fails with a clear error.
    """
    records: List[R] = []
    for row_index, row in enumerate(rows):
        if len(row) != record_type.FIELD_COUNT:
            error = SchemaMismatchError(
                record_type.__name__, record_type.FIELD_COUNT, len(row), row_index
            )
            handle_parse_error(error, f"{record_type.__name__} rows", logger=logger)
        records.append(record_type(*row))
    return records


def map_device_rows(rows: Iterable[RawRow]) -> List[DeviceRecord]:
    """
    Map decoded 13-field rows onto DeviceRecords, preserving order.

    Raises:
        SchemaMismatchError: If any row does not have exactly 13 fields.
    """
    return _map_rows(rows, DeviceRecord)


def map_process_rows(rows: Iterable[RawRow]) -> List[ProcessRecord]:
    """
    Map decoded 6-field rows onto ProcessRecords, preserving order.

    Raises:
        SchemaMismatchError: If any row does not have exactly 6 fields.
    """
    return _map_rows(rows, ProcessRecord)

