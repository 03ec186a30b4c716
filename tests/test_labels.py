from dnsname.psl.labels import canonical_label, idna_to_ascii, idna_to_unicode, label_problem


def test_idna_to_ascii_encodes_unicode_labels() -> None:
    assert idna_to_ascii("bücher") == "xn--bcher-kva"
    assert idna_to_ascii("example") == "example"
    assert idna_to_ascii("xn--g6h") == "xn--g6h"


def test_idna_to_unicode_decodes_punycode_labels() -> None:
    assert idna_to_unicode("xn--bcher-kva") == "bücher"
    assert idna_to_unicode("example") == "example"


def test_canonical_label_folds_case_before_encoding() -> None:
    assert canonical_label("BÜCHER", idna_to_ascii) == "xn--bcher-kva"
    assert canonical_label("CoM", idna_to_ascii) == "com"


def test_label_problem_reports_violations() -> None:
    assert label_problem("example") is None
    assert label_problem("127") is None
    assert label_problem("") == "empty label"
    assert label_problem("a" * 64) == "label longer than 63 characters"
    assert "disallowed character" in (label_problem("exa mple") or "")
    assert "disallowed character" in (label_problem("tab\there") or "")
