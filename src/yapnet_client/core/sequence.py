"""Sequence numbers for outbound envelopes."""


class SequenceProvider:
    """Hands out the seq value for each outbound envelope.

    By default every envelope carries seq 0. With monotonic=True the provider
    counts up from 0, one number per envelope.
    """

    def __init__(self, monotonic: bool = False) -> None:
        """Initialize the provider.

        Args:
            monotonic: Whether to count up instead of always returning 0
        """
        self._monotonic = monotonic
        self._current = 0

    def take(self) -> int:
        """Get the seq value for the next envelope."""
        if not self._monotonic:
            return 0
        value = self._current
        self._current += 1
        return value

    @property
    def monotonic(self) -> bool:
        """Check if the provider counts up."""
        return self._monotonic
