"""Shared line handling for the navigation data file decoders.

Every text table in the navigation database follows the same outer shape: a
short preamble (platform marker, version line, copyright notice), data rows,
and a terminating ``99`` line. :class:`DataLineReader` walks that shape as a
three-state machine and hands only data lines to a per-format decoder, while
:func:`parse_lines` counts what the decoder accepted and rejected.

Typical usage example:
    from xpnav.parsers.base import FixedHeaderPolicy, parse_lines

    result = parse_lines(text, decode_waypoint_line, FixedHeaderPolicy(2))
    print(result.stats.parsed, "waypoints")
"""

import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")

END_OF_DATA = "99"
COMMENT_PREFIX = "#"


class LineState(Enum):
    """Position of the reader within a data file."""

    IN_HEADER = "in_header"
    IN_DATA = "in_data"
    DONE = "done"


class HeaderPolicy:
    """Decides whether a line belongs to the file preamble.

    Subclasses override :meth:`is_header`. The reader only consults the
    policy while it is still in the header state.
    """

    def is_header(self, line: str, line_number: int) -> bool:
        """Return True if ``line`` is part of the preamble.

        Args:
            line: The stripped line text.
            line_number: Zero-based physical line number.
        """
        raise NotImplementedError


class HeuristicHeaderPolicy(HeaderPolicy):
    """Recognizes platform markers, version lines and copyright notices.

    A platform marker is a line whose first token is the single letter ``I``
    or ``A``. Longer tokens starting with those letters are data.
    """

    def is_header(self, line: str, line_number: int) -> bool:
        if not line or line.startswith(COMMENT_PREFIX) or line == END_OF_DATA:
            return False
        if "Copyright" in line:
            return True
        if line.isdigit():
            return True

        tokens = line.split()
        if tokens[0] in ("I", "A"):
            return True
        # "1100 Version - data cycle 2401, build ..."
        return tokens[0].isdigit() and len(tokens) > 1 and tokens[1] == "Version"


class FixedHeaderPolicy(HeaderPolicy):
    """Treats the first ``count`` physical lines as the preamble, blank or not."""

    def __init__(self, count: int) -> None:
        self.count = count

    def is_header(self, line: str, line_number: int) -> bool:
        return line_number < self.count


DEFAULT_POLICY = HeuristicHeaderPolicy()


class DataLineReader:
    """Iterates the data lines of a navigation data file.

    Blank lines and ``#`` comments are ignored in every state. While in the
    header state the policy decides which lines to skip; the first other line
    switches to the data state. A ``99`` line ends iteration.

    Examples:
        >>> reader = DataLineReader("I\\n1100 Version\\nABC 1 2\\n99\\nXYZ\\n")
        >>> list(reader)
        ['ABC 1 2']
        >>> reader.state
        <LineState.DONE: 'done'>
    """

    def __init__(self, text: str, policy: HeaderPolicy = DEFAULT_POLICY) -> None:
        self.text = text
        self.policy = policy
        self.state = LineState.IN_HEADER

    def __iter__(self) -> Iterator[str]:
        for line_number, raw in enumerate(self.text.splitlines()):
            line = raw.strip()

            if self.state is LineState.IN_HEADER and self.policy.is_header(line, line_number):
                continue

            if not line or line.startswith(COMMENT_PREFIX):
                continue

            if line == END_OF_DATA:
                self.state = LineState.DONE
                return

            self.state = LineState.IN_DATA
            yield line


@dataclass
class ParseStats:
    """Counters for a single decode pass.

    Attributes:
        total_lines: Data lines handed to the decoder.
        parsed: Lines that produced a record.
        skipped: Lines the decoder rejected.
        elapsed_ms: Wall time of the pass.
    """

    total_lines: int = 0
    parsed: int = 0
    skipped: int = 0
    elapsed_ms: float = 0.0


@dataclass
class ParseResult(Generic[T]):
    """Records decoded from one file plus the pass statistics."""

    items: list[T] = field(default_factory=list)
    stats: ParseStats = field(default_factory=ParseStats)


class Stopwatch:
    """Measures elapsed milliseconds since construction."""

    def __init__(self) -> None:
        self._start = time.perf_counter()

    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self._start) * 1000.0


def parse_lines(
    text: str,
    decode: Callable[[str], T | None],
    policy: HeaderPolicy = DEFAULT_POLICY,
) -> ParseResult[T]:
    """Run a line decoder over every data line of ``text``.

    The decoder returns a record or None for a line it cannot use. Decoders
    must not raise for malformed input.

    Args:
        text: Whole file content.
        decode: Per-line decoder.
        policy: Preamble policy for this format.

    Returns:
        Decoded records in file order with counters.
    """
    watch = Stopwatch()
    result: ParseResult[T] = ParseResult()

    for line in DataLineReader(text, policy):
        result.stats.total_lines += 1
        item = decode(line)
        if item is None:
            result.stats.skipped += 1
        else:
            result.items.append(item)
            result.stats.parsed += 1

    result.stats.elapsed_ms = watch.elapsed_ms()
    return result


def to_float(value: str, default: float | None = None) -> float | None:
    """Convert a token to float, returning ``default`` when it is not numeric."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def to_int(value: str, default: int | None = None) -> int | None:
    """Convert a token to int, returning ``default`` when it is not an integer."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
