"""Public Suffix List rules compiled into a label trie.

Rules are inserted right to left, so "uk.com" becomes the path
["com", "uk"]. The leading "*" of a wildcard rule is not stored as a
literal child: it gets its own ``wildcard`` edge, which keeps a literal
rule such as "*.example" apart from a label spelled "*".

Exception rules ("!www.ck") are marked on a separate slot of the node
they end on. A node may therefore carry both a normal/wildcard terminal
and an exception terminal, and a lookup reports the deepest of each.

The index is built once and never mutated afterwards: children are
exposed through read-only mapping proxies and every node is frozen.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping, Sequence

from dnsname.psl.errors import RuleSyntaxError
from dnsname.psl.labels import LabelCodec, canonical_label, idna_to_ascii, label_problem, unify_dots

logger = logging.getLogger(__name__)

COMMENT_MARKER = "//"
WILDCARD_LABEL = "*"
EXCEPTION_PREFIX = "!"

_SECTION_MARKERS = {
    "===BEGIN ICANN DOMAINS===": ("icann", True),
    "===END ICANN DOMAINS===": ("icann", False),
    "===BEGIN PRIVATE DOMAINS===": ("private", True),
    "===END PRIVATE DOMAINS===": ("private", False),
}


class RuleKind(enum.Enum):
    NORMAL = "normal"
    WILDCARD = "wildcard"
    EXCEPTION = "exception"


class Section(enum.Enum):
    ICANN = "icann"
    PRIVATE = "private"


@dataclass(frozen=True)
class Rule:
    labels: tuple[str, ...]
    kind: RuleKind = RuleKind.NORMAL
    section: Section | None = None
    line_number: int = 0

    @property
    def text(self) -> str:
        joined = ".".join(self.labels)
        if self.kind is RuleKind.EXCEPTION:
            return EXCEPTION_PREFIX + joined
        return joined

    @property
    def is_private(self) -> bool:
        return self.section is Section.PRIVATE


@dataclass(frozen=True)
class RuleNode:
    children: Mapping[str, RuleNode] = field(default_factory=lambda: MappingProxyType({}))
    wildcard: RuleNode | None = None
    rule: Rule | None = None
    exception: Rule | None = None


@dataclass(frozen=True)
class RuleMatch:
    """Longest rules matching a label sequence, read from the right."""

    rule: Rule | None = None
    exception: Rule | None = None


@dataclass
class _BuildNode:
    children: dict[str, _BuildNode] = field(default_factory=dict)
    wildcard: _BuildNode | None = None
    rule: Rule | None = None
    exception: Rule | None = None

    def freeze(self) -> RuleNode:
        children = {label: child.freeze() for label, child in self.children.items()}
        return RuleNode(
            children=MappingProxyType(children),
            wildcard=self.wildcard.freeze() if self.wildcard is not None else None,
            rule=self.rule,
            exception=self.exception,
        )


def _section_marker(comment: str) -> tuple[str, bool] | None:
    return _SECTION_MARKERS.get(comment[len(COMMENT_MARKER):].strip())


def parse_rule(
    line_number: int,
    line: str,
    section: Section | None = None,
    codec: LabelCodec = idna_to_ascii,
) -> Rule:
    """Compile one non-comment rule token into a Rule."""
    text = unify_dots(line)
    kind = RuleKind.NORMAL
    if text.startswith(EXCEPTION_PREFIX):
        kind = RuleKind.EXCEPTION
        text = text[len(EXCEPTION_PREFIX):]
    elif text.startswith(WILDCARD_LABEL + "."):
        kind = RuleKind.WILDCARD
        text = text[len(WILDCARD_LABEL) + 1:]

    labels: list[str] = []
    for raw_label in text.split("."):
        if WILDCARD_LABEL in raw_label:
            raise RuleSyntaxError(line_number, line, "wildcard allowed only as the leftmost label")
        if EXCEPTION_PREFIX in raw_label:
            raise RuleSyntaxError(line_number, line, "'!' allowed only as a rule prefix")
        try:
            label = canonical_label(raw_label, codec) if raw_label else raw_label
        except UnicodeError as exc:
            raise RuleSyntaxError(line_number, line, f"cannot encode label {raw_label!r}: {exc}") from exc
        problem = label_problem(label)
        if problem:
            raise RuleSyntaxError(line_number, line, problem)
        labels.append(label)

    if kind is RuleKind.EXCEPTION and len(labels) < 2:
        raise RuleSyntaxError(line_number, line, "exception rule needs at least two labels")
    if kind is RuleKind.WILDCARD:
        labels.insert(0, WILDCARD_LABEL)
    return Rule(labels=tuple(labels), kind=kind, section=section, line_number=line_number)


def iter_rules(source_text: str, codec: LabelCodec = idna_to_ascii) -> Iterator[Rule]:
    """Yield every rule of a suffix list, tagged with its list section."""
    section: Section | None = None
    for line_number, raw_line in enumerate(source_text.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue
        if line.startswith(COMMENT_MARKER):
            marker = _section_marker(line)
            if marker is not None:
                name, begins = marker
                section = Section(name) if begins else None
            continue
        # Only the text up to the first whitespace of a line is a rule.
        yield parse_rule(line_number, line.split()[0], section=section, codec=codec)


class RuleIndex:
    """Immutable trie of suffix rules, keyed by labels read right to left.

    Build it with :meth:`build` from the text of a suffix list. A single
    instance is safe to share between threads; several instances built
    from different list snapshots may coexist.
    """

    def __init__(self, root: RuleNode, rules: Sequence[Rule], codec: LabelCodec = idna_to_ascii) -> None:
        self._root = root
        self._rules = tuple(rules)
        self._codec = codec

    @classmethod
    def build(cls, source_text: str, codec: LabelCodec = idna_to_ascii) -> RuleIndex:
        rules = list(iter_rules(source_text, codec=codec))
        if not rules:
            raise RuleSyntaxError(0, "", "no rules found")
        index = cls.from_rules(rules, codec=codec)
        logger.debug("Compiled %d suffix rules into %d trie nodes", len(rules), index.node_count())
        return index

    @classmethod
    def from_rules(cls, rules: Sequence[Rule], codec: LabelCodec = idna_to_ascii) -> RuleIndex:
        root = _BuildNode()
        for rule in rules:
            node = root
            for position in range(len(rule.labels) - 1, -1, -1):
                if position == 0 and rule.kind is RuleKind.WILDCARD:
                    if node.wildcard is None:
                        node.wildcard = _BuildNode()
                    node = node.wildcard
                else:
                    node = node.children.setdefault(rule.labels[position], _BuildNode())
            if rule.kind is RuleKind.EXCEPTION:
                node.exception = rule
            else:
                node.rule = rule
        return cls(root.freeze(), rules, codec=codec)

    @classmethod
    def empty(cls, codec: LabelCodec = idna_to_ascii) -> RuleIndex:
        return cls(RuleNode(), (), codec=codec)

    @property
    def codec(self) -> LabelCodec:
        return self._codec

    @property
    def rule_count(self) -> int:
        return len(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def rules(self) -> Iterator[Rule]:
        return iter(self._rules)

    def section_counts(self) -> dict[str, int]:
        counts = {"icann": 0, "private": 0, "unsectioned": 0}
        for rule in self._rules:
            key = rule.section.value if rule.section is not None else "unsectioned"
            counts[key] += 1
        return counts

    def node_count(self) -> int:
        count = 0
        stack = [self._root]
        while stack:
            node = stack.pop()
            count += 1
            stack.extend(node.children.values())
            if node.wildcard is not None:
                stack.append(node.wildcard)
        return count

    def lookup(self, labels: Sequence[str], include_private: bool = True) -> RuleMatch:
        """Find the longest normal/wildcard and exception rules for ``labels``.

        ``labels`` must already be canonical (see :meth:`codec`). The walk
        starts at the rightmost label and follows the literal edge for each
        label, taking the wildcard edge only when no literal edge exists.
        """
        best: Rule | None = None
        exception: Rule | None = None
        node: RuleNode | None = self._root
        for label in reversed(labels):
            child = node.children.get(label)
            node = child if child is not None else node.wildcard
            if node is None:
                break
            if node.rule is not None and (include_private or not node.rule.is_private):
                best = node.rule
            if node.exception is not None and (include_private or not node.exception.is_private):
                exception = node.exception
        return RuleMatch(rule=best, exception=exception)
