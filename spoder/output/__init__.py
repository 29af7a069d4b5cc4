"""Output package — sinks and post-processing for extracted text."""

from spoder.output.filters import categorize, find_emails, find_phone_numbers
from spoder.output.sinks import CollectingSink, FileSink, PrintSink, drain

__all__ = [
    "CollectingSink",
    "FileSink",
    "PrintSink",
    "categorize",
    "drain",
    "find_emails",
    "find_phone_numbers",
]
