from __future__ import annotations

from orgtangle.core.scanner import (
    IncludeDirective,
    LiteralSegment,
    find_tangle_annotations,
    scan_includes,
    segment,
)


def test_scan_finds_quoted_include_and_ignores_trailing_content() -> None:
    text = '* Intro\n#+include: "chapters/one.org" :minlevel 2\nbody\n'
    directives = list(scan_includes(text))

    assert len(directives) == 1
    d = directives[0]
    assert d.target == "chapters/one.org"
    assert text[d.start:d.end] == '#+include: "chapters/one.org" :minlevel 2'
    assert d.line == 2


def test_scan_keyword_is_case_insensitive_and_allows_indentation() -> None:
    text = '  #+INCLUDE: "a.org"\n#+Include:"b.org"\n'
    assert [d.target for d in scan_includes(text)] == ["a.org", "b.org"]


def test_scan_skips_unquoted_and_computed_targets() -> None:
    text = "#+include: a.org\n#+include: (concat \"a\" \".org\")\ntext #+include: \"c.org\"\n"
    assert list(scan_includes(text)) == []


def test_scan_resumes_from_offset() -> None:
    text = '#+include: "a.org"\nmiddle\n#+include: "b.org"\n'
    first = next(scan_includes(text))
    rest = list(scan_includes(text, first.end))

    assert [d.target for d in rest] == ["b.org"]


def test_scan_is_lazy_and_restartable() -> None:
    text = '#+include: "a.org"\n#+include: "b.org"\n'
    it = scan_includes(text)
    assert next(it).target == "a.org"
    # A fresh scan starts over independently of the first iterator.
    assert [d.target for d in scan_includes(text)] == ["a.org", "b.org"]
    assert next(it).target == "b.org"


def test_segment_round_trips_source_text() -> None:
    text = 'head\n#+include: "a.org"\n#+include: "b.org"\ntail'
    segments = segment(text)

    rebuilt = "".join(s.text if isinstance(s, LiteralSegment) else text[s.start:s.end] for s in segments)
    assert rebuilt == text
    kinds = [type(s) for s in segments]
    assert kinds == [LiteralSegment, IncludeDirective, LiteralSegment, IncludeDirective, LiteralSegment]
    # The newline between the two directives is its own literal.
    assert segments[2].text == "\n"


def test_segment_without_directives_is_single_literal() -> None:
    assert segment("plain\n") == [LiteralSegment("plain\n", 0, 6)]
    assert segment("") == []


def test_find_tangle_annotations_bare_and_quoted() -> None:
    text = '#+begin_src python :tangle yes :mkdirp t\n#+begin_src sh :tangle "out dir/run.sh"\n'
    found = list(find_tangle_annotations(text))

    assert [a.raw for a in found] == ["yes", '"out dir/run.sh"']
    assert found[1].quoted
    assert found[1].value == "out dir/run.sh"
    assert text[found[0].start:found[0].end] == "yes"
