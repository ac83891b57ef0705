"""
Scope tracker: tree-shaped subcommand resolution without recursion.

Counters
- walk:   nesting of the declaration currently being visited.
- commit: deepest level whose subcommand token was found in the input.
- max:    historical maximum of commit.
- done:   set once the deepest committed path has been closed; from then on
          every declaration is inert. Never reset.

Liveness
- ordinary declarations are live iff walk == max (the deepest committed scope);
  sibling branches that were not taken stay invisible.
- subcommand declarations are live iff walk == commit + 1 (the immediate
  next candidate under the committed path).

Groups only affect help layout. They are closed by done() before any depth
change and are tracked in inert scopes too, so done() always closes the
construct that was opened last.
"""
from .faults import FaultCode, InvalidStateError, NestedGroupError, getdoc


class ScopeTracker:
    __slots__ = ("walk", "commit", "max", "done", "group")

    def __init__(self):
        self.walk = 0
        self.commit = 0
        self.max = 0
        self.done = False
        self.group = None

    def live(self, *, subcommand=False):
        if self.done:
            return False
        if subcommand:
            return self.walk == self.commit + 1
        return self.walk == self.max

    def descend(self):
        self.walk += 1

    def commit_level(self):
        self.commit += 1
        self.max = max(self.max, self.commit)

    def open_group(self, name, /):
        if self.group is not None:
            raise NestedGroupError(
                "group %r cannot be opened within group %r" % (name, self.group),
                title="nested group",
                code=FaultCode.NESTED_GROUP,
                hint="groups cannot be nested; close %r with done() first" % self.group,
                docs=getdoc(FaultCode.NESTED_GROUP),
                name=name,
                group=self.group,
            )
        self.group = name

    def close(self):
        """
        Close the open group, or else the current subcommand level.
        """
        if self.group is not None:
            self.group = None
            return

        if self.walk == 0:
            raise InvalidStateError(
                "call to done() at top-level",
                title="invalid parser state",
                code=FaultCode.INVALID_STATE,
                hint="every done() must close a subcommand or group opened before it",
                docs=getdoc(FaultCode.INVALID_STATE),
            )

        if self.walk == self.commit == self.max:
            self.done = True
        self.walk -= 1

    def __repr__(self):
        return "ScopeTracker(walk=%d, commit=%d, max=%d, done=%s, group=%r)" % (
            self.walk, self.commit, self.max, self.done, self.group
        )


__all__ = (
    "ScopeTracker",
)
