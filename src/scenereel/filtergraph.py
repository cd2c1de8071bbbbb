"""FilterGraphBuilder — accumulates labeled ffmpeg filter nodes.

Each node is one filter chain: zero or more input pads, a comma-separated
list of filters, and zero or more output pads. `render()` joins the chains
with ';' into a single -filter_complex expression, so callers never
concatenate graph strings by hand.

    graph = FilterGraphBuilder()
    out = graph.add(["0:v", "1:v"], "xfade=transition=fade:duration=0.5:offset=4.5")
    graph.add([out], "scale=1280:720", outputs=["vout"])
    graph.render()
    # '[0:v][1:v]xfade=transition=fade:duration=0.5:offset=4.5[f0];[f0]scale=1280:720[vout]'
"""

import re
from dataclasses import dataclass


_LABEL_RE = re.compile(r"^[A-Za-z0-9_:.]+$")


@dataclass(frozen=True)
class FilterNode:
    inputs: tuple[str, ...]
    filters: tuple[str, ...]
    outputs: tuple[str, ...]

    def render(self) -> str:
        ins = "".join(f"[{label}]" for label in self.inputs)
        outs = "".join(f"[{label}]" for label in self.outputs)
        return f"{ins}{','.join(self.filters)}{outs}"


def filter_expr(name: str, *args, **options) -> str:
    """Render one filter, e.g. filter_expr("adelay", "500|500") -> 'adelay=500|500'.

    Keyword options render as key=value pairs in the order given.
    """
    parts = [str(a) for a in args]
    parts.extend(f"{k}={v}" for k, v in options.items())
    if not parts:
        return name
    return f"{name}={':'.join(parts)}"


class FilterGraphBuilder:
    """Collects filter chains and hands out unique intermediate labels."""

    def __init__(self, prefix: str = "f"):
        self._prefix = prefix
        self._nodes: list[FilterNode] = []
        self._labels: set[str] = set()
        self._counter = 0

    def label(self, hint: str | None = None) -> str:
        """Return a fresh label, using `hint` verbatim when it is still free."""
        if hint is not None and hint not in self._labels:
            self._check_label(hint)
            return hint
        while True:
            candidate = f"{hint or self._prefix}{self._counter}"
            self._counter += 1
            if candidate not in self._labels:
                return candidate

    @staticmethod
    def _check_label(label: str) -> None:
        if not _LABEL_RE.match(label):
            raise ValueError(f"Invalid filter pad label: {label!r}")

    def add(
        self,
        inputs: list[str] | tuple[str, ...],
        *filters: str,
        outputs: list[str] | tuple[str, ...] | None = None,
    ) -> str:
        """Append a filter chain and return its (first) output label.

        When `outputs` is omitted a single fresh label is generated.
        """
        if not filters:
            raise ValueError("A filter chain needs at least one filter")
        for label in inputs:
            self._check_label(label)
        if outputs is None:
            outputs = [self.label()]
        for label in outputs:
            self._check_label(label)
            if label in self._labels:
                raise ValueError(f"Filter pad label already used: [{label}]")
            self._labels.add(label)

        self._nodes.append(FilterNode(tuple(inputs), tuple(filters), tuple(outputs)))
        return outputs[0] if outputs else ""

    def __len__(self) -> int:
        return len(self._nodes)

    def render(self) -> str:
        if not self._nodes:
            raise ValueError("Filter graph is empty")
        return ";".join(node.render() for node in self._nodes)
