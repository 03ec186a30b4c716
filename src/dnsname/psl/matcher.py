from __future__ import annotations

from dataclasses import dataclass

from dnsname.psl.errors import NameSyntaxError
from dnsname.psl.labels import (
    MAX_NAME_LENGTH,
    LabelCodec,
    canonical_label,
    idna_to_ascii,
    label_problem,
    unify_dots,
)
from dnsname.psl.rules import Rule, RuleIndex

ROOT_NAME = "."


@dataclass(frozen=True)
class NormalizedName:
    labels: tuple[str, ...]
    is_rooted: bool = False


@dataclass(frozen=True)
class ParsedName:
    """A DNS name split into registrable label and public suffix.

    ``suffix_length`` counts the labels of the public suffix; it is 0 only
    for the root name ".". ``rule`` is the prevailing list rule, or None
    when the implicit "*" rule applied.
    """

    labels: tuple[str, ...]
    is_rooted: bool
    suffix_length: int
    rule: Rule | None = None

    def _join(self, labels: tuple[str, ...]) -> str:
        return ".".join(labels) + (ROOT_NAME if self.is_rooted else "")

    def name(self) -> str:
        if not self.labels:
            return ROOT_NAME
        return self._join(self.labels)

    def rname(self) -> str:
        return self.name()[::-1]

    def suffix(self) -> str | None:
        if self.suffix_length < 1 or len(self.labels) < self.suffix_length:
            return None
        return self._join(self.labels[-self.suffix_length:])

    def root(self) -> str | None:
        if self.suffix_length < 1 or len(self.labels) <= self.suffix_length:
            return None
        return self._join(self.labels[-(self.suffix_length + 1):])

    def registrable(self) -> str | None:
        if self.suffix_length < 1 or len(self.labels) <= self.suffix_length:
            return None
        return self.labels[-(self.suffix_length + 1)]

    def to_dict(self) -> dict[str, object]:
        rule = self.rule
        return {
            "name": self.name(),
            "rname": self.rname(),
            "suffix": self.suffix(),
            "root": self.root(),
            "registrable": self.registrable(),
            "rule": rule.text if rule else None,
            "section": rule.section.value if rule and rule.section else None,
            "is_rooted": self.is_rooted,
        }

    def __str__(self) -> str:
        if not self.labels:
            return ROOT_NAME
        return ".".join(self.labels)


def normalize_name(raw_name: str, codec: LabelCodec = idna_to_ascii) -> NormalizedName:
    """Split a candidate name into canonical labels.

    Raises NameSyntaxError with the offset of the offending label.
    """
    if not raw_name:
        raise NameSyntaxError("empty name", 0)
    body = unify_dots(raw_name)
    if body == ROOT_NAME:
        return NormalizedName(labels=(), is_rooted=True)

    is_rooted = body.endswith(".")
    if is_rooted:
        if body.endswith(".."):
            raise NameSyntaxError("multiple trailing dots", len(body.rstrip(".")))
        body = body[:-1]

    labels: list[str] = []
    position = 0
    for raw_label in body.split("."):
        try:
            label = canonical_label(raw_label, codec) if raw_label else raw_label
        except UnicodeError as exc:
            raise NameSyntaxError(f"cannot encode label {raw_label!r}: {exc}", position) from exc
        problem = label_problem(label)
        if problem:
            raise NameSyntaxError(problem, position)
        labels.append(label)
        position += len(raw_label) + 1

    if sum(len(label) for label in labels) + len(labels) - 1 > MAX_NAME_LENGTH:
        raise NameSyntaxError(f"name longer than {MAX_NAME_LENGTH} characters", 0)
    return NormalizedName(labels=tuple(labels), is_rooted=is_rooted)


def classify(raw_name: str, index: RuleIndex, include_private: bool = True) -> ParsedName:
    """Classify ``raw_name`` against the rules of ``index``.

    The deepest matching rule wins. When it is an exception (exceptions win
    a tie with a normal or wildcard rule of the same length) it gives up its
    leftmost label. With no match at all the rightmost label is the suffix.
    """
    normalized = normalize_name(raw_name, codec=index.codec)
    if not normalized.labels:
        return ParsedName(labels=(), is_rooted=normalized.is_rooted, suffix_length=0)

    match = index.lookup(normalized.labels, include_private=include_private)
    best_length = len(match.rule.labels) if match.rule is not None else 0
    if match.exception is not None and len(match.exception.labels) >= best_length:
        rule: Rule | None = match.exception
        suffix_length = len(match.exception.labels) - 1
    elif match.rule is not None:
        rule = match.rule
        suffix_length = len(match.rule.labels)
    else:
        rule = None
        suffix_length = 1
    return ParsedName(
        labels=normalized.labels,
        is_rooted=normalized.is_rooted,
        suffix_length=suffix_length,
        rule=rule,
    )
