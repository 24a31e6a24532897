#
# src/cliharness/writers.py
#
"""
Composable text sinks used to relay process output.

``PrefixedLineWriter`` marks every line it passes through; ``MultiWriter``
duplicates writes across several sinks. Both hold plain references to their
targets and nothing else.
"""
from cliharness.protocols import TextSink


class MultiWriter:
    """Forwards every write, flush and close to each target in order."""

    def __init__(self, *targets: TextSink):
        self.targets = list(targets)

    def write(self, data: str) -> None:
        for target in self.targets:
            target.write(data)

    def flush(self) -> None:
        for target in self.targets:
            if hasattr(target, "flush"):
                target.flush()

    def close(self) -> None:
        for target in self.targets:
            target.close()


class PrefixedLineWriter:
    """
    Writes ``prefix`` to the target at the start of every line.

    The writer remembers whether the last character it emitted was a newline,
    so line starts are found correctly across write boundaries. Closing is a
    no-op: the target's lifecycle belongs to whoever created it.
    """

    def __init__(self, prefix: str, target: TextSink):
        self.prefix = prefix
        self.target = target
        self.last_char = "\n"

    def write(self, data: str) -> int:
        """Returns the number of characters written, not counting prefixes."""
        written = 0
        for char in data:
            if self.last_char == "\n":
                self.target.write(self.prefix)
            count = self.target.write(char)
            written += len(char) if count is None else count
            self.last_char = char
        return written

    def flush(self) -> None:
        if hasattr(self.target, "flush"):
            self.target.flush()

    def close(self) -> None:
        pass

# 🔼⚙️
