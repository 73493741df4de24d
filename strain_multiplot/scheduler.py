"""
Dependency-driven update scheduling for the multiplot.

``TieredScheduler`` holds named update tiers.  Each tier declares the
inputs it depends on; a call to ``update(**inputs)`` runs, in
registration order, every tier whose inputs changed since it last
ran.  Inputs are compared structurally (``structurally_equal``), so a
new but equal dict or list coming from the state store does not trigger
a redraw.  Mapping key order counts: filter values set the row order.

Two relations tie tiers together:

``after``
    Run whenever one of the listed tiers ran in the same cycle
    (recolouring must follow a rebuild, whose points are uncoloured).
``covered_by``
    Skip when one of the listed tiers ran in the same cycle, because
    that tier already applied this input (a rebuild draws the
    threshold with the current visibility).

``Memo`` caches one pure pipeline stage the same way.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Sequence, Tuple

_UNSET = object()


def structurally_equal(a: Any, b: Any) -> bool:
    """``==`` that also requires mappings to list their keys in the same order."""
    if a is b:
        return True
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        return (list(a) == list(b)
                and all(structurally_equal(a[k], b[k]) for k in a))
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        return (type(a) is type(b) and len(a) == len(b)
                and all(structurally_equal(x, y) for x, y in zip(a, b)))
    return a == b


@dataclass
class Tier:
    name: str
    depends_on: Tuple[str, ...]
    action: Callable[..., None]
    reads: Tuple[str, ...] = ()
    after: Tuple[str, ...] = ()
    covered_by: Tuple[str, ...] = ()
    last_inputs: Dict[str, Any] = field(default_factory=dict)

    def changed(self, inputs: Dict[str, Any]) -> bool:
        return any(
            self.last_inputs.get(name, _UNSET) is _UNSET
            or not structurally_equal(self.last_inputs[name], inputs[name])
            for name in self.depends_on
        )


class TieredScheduler:
    """Ordered set of update tiers keyed to named inputs."""

    def __init__(self):
        self._tiers: List[Tier] = []

    def add_tier(
        self,
        name: str,
        depends_on: Sequence[str],
        action: Callable[..., None],
        *,
        reads: Sequence[str] = (),
        after: Sequence[str] = (),
        covered_by: Sequence[str] = (),
    ) -> None:
        """Register a tier.

        *action* is called with the tier's inputs as keyword arguments:
        its *depends_on* inputs plus the *reads* inputs, which are passed
        along but never compared.
        Tiers named in *after* / *covered_by* must already be
        registered.
        """
        known = {t.name for t in self._tiers}
        if name in known:
            raise ValueError(f"Tier '{name}' is already registered")
        unknown = (set(after) | set(covered_by)) - known
        if unknown:
            raise ValueError(
                f"Tier '{name}' refers to unregistered tiers: {sorted(unknown)}"
            )
        self._tiers.append(Tier(
            name=name,
            depends_on=tuple(depends_on),
            action=action,
            reads=tuple(reads),
            after=tuple(after),
            covered_by=tuple(covered_by),
        ))

    @property
    def tier_names(self) -> List[str]:
        return [t.name for t in self._tiers]

    def update(self, **inputs: Any) -> List[str]:
        """Run the tiers affected by *inputs*; return their names.

        Every declared dependency must be supplied.  A tier's inputs are
        recorded only after its action returns, so a tier that raised
        runs again on the next update.
        """
        fired: List[str] = []
        for tier in self._tiers:
            names = tier.depends_on + tier.reads
            missing = [n for n in names if n not in inputs]
            if missing:
                raise KeyError(f"Tier '{tier.name}' is missing inputs: {missing}")
            tier_inputs = {n: inputs[n] for n in tier.depends_on}

            if any(name in fired for name in tier.covered_by):
                tier.last_inputs = tier_inputs
                continue
            if not (tier.changed(tier_inputs)
                    or any(name in fired for name in tier.after)):
                continue

            tier.action(**{n: inputs[n] for n in names})
            tier.last_inputs = tier_inputs
            fired.append(tier.name)
        return fired

    def reset(self) -> None:
        """Forget recorded inputs so every tier fires on the next update."""
        for tier in self._tiers:
            tier.last_inputs = {}


class Memo:
    """Cache the result of *func* for structurally equal arguments."""

    def __init__(self, func: Callable[..., Any]):
        self._func = func
        self._args = _UNSET
        self._result = None
        self.calls = 0

    def __call__(self, *args: Any) -> Any:
        if self._args is _UNSET or not structurally_equal(self._args, args):
            self._result = self._func(*args)
            self._args = args
            self.calls += 1
        return self._result

    def clear(self) -> None:
        self._args = _UNSET
        self._result = None
