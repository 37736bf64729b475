"""Exceptions raised by the record store and the ledger."""
from __future__ import annotations


class LedgerError(Exception):
    """Base class for armory errors the CLI reports instead of crashing on."""


class RecordNotFound(LedgerError, LookupError):
    def __init__(self, kind: str, record_id):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} {record_id} not found")


class UnknownRecordKind(LedgerError, ValueError):
    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"unknown record kind {kind!r}")
