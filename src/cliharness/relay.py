#
# src/cliharness/relay.py
#
"""
Live relaying of a byte stream into text sinks.
"""
import asyncio
import codecs

import structlog

from cliharness.config import DEFAULT_RELAY_PREFIX
from cliharness.protocols import TextSink
from cliharness.writers import MultiWriter, PrefixedLineWriter

log = structlog.get_logger("relay")

CHUNK_SIZE = 64 * 1024


async def relay_stream(
    reader: asyncio.StreamReader,
    sink: TextSink | None = None,
    encoding: str = "utf-8",
) -> bytes:
    """
    Reads ``reader`` to EOF, forwarding decoded text to ``sink`` as it arrives.

    Returns every byte read. The sink is flushed after each chunk when it has
    a ``flush`` method, and is never closed.
    """
    captured = bytearray()
    decoder = codecs.getincrementaldecoder(encoding)(errors="replace")

    while chunk := await reader.read(CHUNK_SIZE):
        captured.extend(chunk)
        if sink is not None:
            text = decoder.decode(chunk)
            if text:
                sink.write(text)
                _flush(sink)

    if sink is not None:
        tail = decoder.decode(b"", final=True)
        if tail:
            sink.write(tail)
        _flush(sink)

    return bytes(captured)


def _flush(sink: TextSink) -> None:
    flush = getattr(sink, "flush", None)
    if flush is not None:
        flush()


async def _relay_and_close(reader: asyncio.StreamReader, chain: MultiWriter, encoding: str) -> bytes:
    try:
        data = await relay_stream(reader, chain, encoding)
        log.debug("Relay source reached EOF", bytes_relayed=len(data))
        return data
    finally:
        chain.close()


def setup_io_relay(
    source: asyncio.StreamReader,
    prefixed_destination: TextSink,
    other_destination: TextSink,
    prefix: str = DEFAULT_RELAY_PREFIX,
    encoding: str = "utf-8",
) -> "asyncio.Task[bytes]":
    """
    Starts relaying ``source`` to a prefixed view and a verbatim view.

    ``prefixed_destination`` receives every line marked with ``prefix``;
    ``other_destination`` receives the text unchanged and is closed once the
    source is exhausted. Must be called from a running event loop. The
    returned task resolves to the raw bytes relayed.
    """
    chain = MultiWriter(PrefixedLineWriter(prefix, prefixed_destination), other_destination)
    return asyncio.create_task(_relay_and_close(source, chain, encoding))

# 🔼⚙️
