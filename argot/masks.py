"""
Consumption mask and short-option cluster ("run") resolution.

ConsumptionMask
- The set of token positions no binding has claimed yet.
- Starts as 1 .. store.bound (program name and argstop tail excluded).
- Only shrinks: claim() removes, nothing ever re-adds.

RunResolver
- Lazily tracks, per token, which character offsets of a cluster such as
  "-vxvx" are still open. Offsets start at 1 to skip the leading dash.
- A token enters run tracking at most once and stays there for good.
- When a token's open offsets run out, the token is claimed in the mask.
"""
from .faults import FaultCode, ValuedArgInRunError, getdoc
from .utils import ordinal


class ConsumptionMask:
    """
    Unclaimed token positions, iterated in ascending order.
    """
    __slots__ = ("_open",)

    def __init__(self, bound, /):
        self._open = set(range(1, bound))

    def claim(self, position, /):
        """
        Mark a position as consumed (no-op when already claimed).
        """
        self._open.discard(position)

    def first(self):
        """
        Lowest unclaimed position, or None when everything was claimed.
        """
        return min(self._open, default=None)

    def __contains__(self, position, /):
        return position in self._open

    def __iter__(self):
        # snapshot: callers claim while sweeping
        return iter(sorted(self._open))

    def __len__(self):
        return len(self._open)

    def __bool__(self):
        return bool(self._open)

    def __repr__(self):
        return f"ConsumptionMask({sorted(self._open)!r})"


class RunResolver:
    """
    Per-token open-offset sets for short-option clusters.

    Parameters
    - store: TokenStore the positions refer to.
    - mask: ConsumptionMask to retire exhausted clusters from.
    """
    __slots__ = ("_store", "_mask", "_runs")

    def __init__(self, store, mask, /):
        self._store = store
        self._mask = mask
        self._runs = {}

    def tracked(self, position, /):
        """
        Whether the token at `position` already entered run tracking.
        """
        return position in self._runs

    def resolve(self, position, short, expect_value, /):
        """
        Claim every open occurrence of `short` inside the cluster at `position`.

        Returns
        - the number of characters claimed (0 means no match).

        Raises
        - ValuedArgInRunError when `expect_value` is set and `short` occurs in the
          cluster but is not its last character.
        """
        token = self._store[position]
        offsets = [offset for offset, char in enumerate(token) if char == short]
        if not offsets:
            return 0

        if expect_value and not token.endswith(short):
            raise ValuedArgInRunError(
                "option '-%s' takes a value but sits inside cluster %r from %s position" % (
                    short, token, ordinal(position)
                ),
                title="valued option inside a cluster",
                code=FaultCode.VALUED_ARG_IN_RUN,
                hint="short-code runs only support valued-args as the last character in the run",
                docs=getdoc(FaultCode.VALUED_ARG_IN_RUN),
                short=short,
                token=token,
                position=position,
            )

        run = self._runs.setdefault(position, set(range(1, len(token))))
        if not run:
            return 0

        claimed = run.intersection(offsets)
        run.difference_update(claimed)

        if claimed and not run:
            self._mask.claim(position)
        return len(claimed)

    def remaining(self, position, /):
        """
        Still-open offsets of the cluster at `position`, ascending (empty when untracked).
        """
        return sorted(self._runs.get(position, ()))

    def __repr__(self):
        runs = {position: sorted(run) for position, run in self._runs.items()}
        return f"RunResolver({runs!r})"


__all__ = (
    "ConsumptionMask",
    "RunResolver",
)
