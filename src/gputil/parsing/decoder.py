"""
CSV decoding of diagnostics tool output.

The tool prints one record per line, comma separated, without a header.
Fields may carry surrounding whitespace (the tool pads after each comma),
which is stripped here.
"""

import csv
import io
import logging
import re
from typing import Iterator, List, Optional

from ..models.records import RawRow
from ..validation import MalformedCsvError, handle_parse_error

logger = logging.getLogger(__name__)

# A quoted field: optional padding after the delimiter, then "..." with ""
# as the escaped quote. Whatever quote remains once these are removed
# sits inside an unquoted field.
_QUOTED_FIELD = re.compile(r'(^|,) *"(?:[^"]|"")*"')


def _is_blank(row: List[str]) -> bool:
    # csv yields [] for an empty line and ['   '] for a whitespace-only one
    return not row or (len(row) == 1 and not row[0].strip())


def _has_bare_quote(record_text: str) -> bool:
    return '"' in _QUOTED_FIELD.sub(r"\1", record_text)


def iter_rows(raw: bytes) -> Iterator[RawRow]:
    """
    Lazily decode CSV bytes into rows of trimmed fields.

    Rows are produced in input order; blank lines are skipped. The first
    record fixes the expected field count for the rest of the input.

    Args:
        raw: Tool output. Undecodable UTF-8 bytes are replaced.

    Yields:
        One list of stripped fields per record.

    Raises:
        MalformedCsvError: On a syntax error such as an unterminated quoted
            field or a quote inside an unquoted field, or when a record's
            field count differs from the first one.
    """
    text = raw.decode("utf-8", errors="replace")
    # Lines read for the current record, kept to check its raw quoting.
    record_lines: List[str] = []

    def source() -> Iterator[str]:
        # newline="" hands line endings to the csv module untranslated, so
        # quoted fields spanning lines are read correctly.
        for line in io.StringIO(text, newline=""):
            record_lines.append(line)
            yield line

    # The tool pads each field with a space, so initial spaces are skipped
    # for a quote to open a field.
    reader = csv.reader(source(), skipinitialspace=True, strict=True)
    expected_fields: Optional[int] = None

    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            raise MalformedCsvError(str(e), line=reader.line_num) from e

        record_text = "".join(record_lines)
        record_lines.clear()

        if _is_blank(row):
            continue

        if _has_bare_quote(record_text):
            raise MalformedCsvError('bare " in non-quoted field', line=reader.line_num)

        if expected_fields is None:
            expected_fields = len(row)
        elif len(row) != expected_fields:
            raise MalformedCsvError(
                f"wrong number of fields: expected {expected_fields}, got {len(row)}",
                line=reader.line_num,
            )

        yield [field.strip() for field in row]


def decode_rows(raw: bytes) -> List[RawRow]:
    """
    Decode CSV bytes into a list of rows of trimmed fields.

    Decoding is all-or-nothing: on a malformed record the error is raised and
    none of the rows decoded before it are returned.

    Raises:
        MalformedCsvError: If the input is not well-formed CSV.
    """
    try:
        rows = list(iter_rows(raw))
    except MalformedCsvError as e:
        handle_parse_error(e, "tool output", logger=logger)
        raise
    logger.debug(f"Decoded {len(rows)} rows from {len(raw)} bytes")
    return rows
