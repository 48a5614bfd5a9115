"""CSV encoding of records.

The table is one header row followed by one row per record::

    ID,Name,Image,Description,Gender,Observations
    1,Tom,tom.png,orange cat,male,none

Rows end in CRLF as in RFC 4180. With that terminator the csv writer quotes
any value holding a comma, quote, CR or LF, so all of them round-trip.
Reading accepts LF-only files too. Streams must be opened with ``newline=""``.
"""

from __future__ import annotations

import csv
from collections.abc import Iterable, Iterator, Sequence
from typing import TextIO

from gatos.errors import MalformedRowError
from gatos.store.records import FIELDS, Record

HEADER = ("ID", "Name", "Image", "Description", "Gender", "Observations")

LINE_TERMINATOR = "\r\n"


def encode_header() -> list[str]:
    return list(HEADER)


def encode_row(record: Record) -> list[str]:
    return [str(record.id)] + [getattr(record, name) for name in FIELDS]


def decode_row(row: Sequence[str]) -> Record:
    """Decode one parsed CSV row.

    Raises:
        MalformedRowError: if the row does not have exactly one column per
            header title, or the id is not a non-negative integer.
    """
    if len(row) != len(HEADER):
        raise MalformedRowError(f"expected {len(HEADER)} columns, got {len(row)}")
    raw_id = row[0]
    if not raw_id.isascii() or not raw_id.isdigit():
        raise MalformedRowError(f"invalid id {raw_id!r}")
    return Record(int(raw_id), *row[1:])


def _writer(fp: TextIO):
    return csv.writer(fp, lineterminator=LINE_TERMINATOR)


def write_table(fp: TextIO, records: Iterable[Record]) -> None:
    """Write the header and every record."""
    writer = _writer(fp)
    writer.writerow(encode_header())
    writer.writerows(encode_row(r) for r in records)


def append_rows(fp: TextIO, records: Iterable[Record]) -> None:
    """Write data rows only; the header is assumed to be present already."""
    _writer(fp).writerows(encode_row(r) for r in records)


def read_table(fp: TextIO) -> Iterator[Record]:
    """Yield records in file order. An empty stream is an empty table."""
    reader = csv.reader(fp)
    try:
        header = next(reader)
    except StopIteration:
        return
    except csv.Error as e:
        raise MalformedRowError(str(e), reader.line_num) from e
    if tuple(header) != HEADER:
        raise MalformedRowError(f"unexpected header {header!r}", reader.line_num)

    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            raise MalformedRowError(str(e), reader.line_num) from e
        if not row:  # blank line
            continue
        try:
            yield decode_row(row)
        except MalformedRowError as e:
            raise MalformedRowError(str(e), reader.line_num) from e
