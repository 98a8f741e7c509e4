from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from orgtangle.core.exceptions import CyclicDependencyError, MissingIncludeError
from orgtangle.core.resolver import (
    AncestorChain,
    IncludeResolver,
    resolve,
    resolve_with_dependencies,
)


def test_document_without_includes_gets_one_trailing_newline(write_org) -> None:
    root = write_org("main.org", "* Title\nsome text\n")
    assert resolve(root) == "* Title\nsome text\n\n"


def test_resolution_without_includes_is_stable_on_second_pass(write_org, tmp_path: Path) -> None:
    root = write_org("main.org", "plain body")
    once = resolve(root)
    again = write_org("again.org", once)

    # Only the per-level newline is added again.
    assert resolve(again) == once + "\n"


def test_nested_includes_splice_at_directive_positions(write_org) -> None:
    root = write_org("a.org", 'A-top\n#+include: "b.org"\nA-bottom\n')
    write_org("b.org", 'B-top\n#+include: "c.org"\nB-bottom\n')
    write_org("c.org", "C-body\n")

    content = resolve(root)

    assert content == "A-top\nB-top\nC-body\n\n\nB-bottom\n\n\nA-bottom\n\n"
    assert "#+include" not in content


def test_include_paths_resolve_against_including_file(write_org) -> None:
    root = write_org("main.org", '#+include: "docs/part.org"\n')
    write_org("docs/part.org", '#+include: "../shared/common.org"\n')
    write_org("shared/common.org", "common\n")

    assert "common" in resolve(root)


def test_two_file_cycle_names_offending_document(write_org) -> None:
    root = write_org("a.org", '#+include: "b.org"\n')
    write_org("b.org", '#+include: "a.org"\n')

    with pytest.raises(CyclicDependencyError) as excinfo:
        resolve(root)

    assert excinfo.value.path == root
    assert root in excinfo.value.chain
    assert str(root) in str(excinfo.value)


def test_self_include_is_a_cycle(write_org) -> None:
    root = write_org("self.org", 'text\n#+include: "self.org"\n')

    with pytest.raises(CyclicDependencyError) as excinfo:
        resolve(root)

    assert excinfo.value.path == root


def test_cycle_error_is_a_runtime_error(write_org) -> None:
    root = write_org("a.org", '#+include: "b.org"\n')
    write_org("b.org", '#+include: "c.org"\n')
    write_org("c.org", '#+include: "a.org"\n')

    with pytest.raises(RuntimeError):
        resolve(root)


def test_missing_include_propagates(write_org, tmp_path: Path) -> None:
    root = write_org("main.org", '#+include: "sub/inner.org"\n')
    write_org("sub/inner.org", '#+include: "gone.org"\n')

    with pytest.raises(MissingIncludeError) as excinfo:
        resolve(root)

    assert excinfo.value.path == tmp_path / "sub" / "gone.org"
    assert excinfo.value.included_from == tmp_path / "sub" / "inner.org"
    assert isinstance(excinfo.value, FileNotFoundError)


def test_missing_root_raises_missing_include(tmp_path: Path) -> None:
    with pytest.raises(MissingIncludeError):
        resolve(tmp_path / "nope.org")


def test_relative_tangle_target_is_anchored_to_included_file(write_org, tmp_path: Path) -> None:
    root = write_org("main.org", '#+include: "sub/inc.org"\n')
    write_org("sub/inc.org", "#+begin_src python :tangle out/x.py\npass\n#+end_src\n")

    content = resolve(root)

    assert f":tangle {tmp_path / 'sub' / 'out' / 'x.py'}\n" in content


def test_yes_tangle_in_included_file_uses_that_file_name(write_org, tmp_path: Path) -> None:
    root = write_org("main.org", '#+include: "lib/util.org"\n')
    write_org("lib/util.org", "#+begin_src python :tangle yes\n#+end_src\n")

    assert f":tangle {tmp_path / 'lib' / 'util'}\n" in resolve(root)


def test_root_tangle_in_deeply_nested_file_points_at_root(write_org, tmp_path: Path) -> None:
    root = write_org("main.org", '#+include: "a/one.org"\n')
    write_org("a/one.org", '#+include: "b/two.org"\n')
    write_org("a/b/two.org", "#+begin_src sh :tangle root\n#+end_src\n")

    assert f":tangle {tmp_path / 'main'}\n" in resolve(root)


def test_relative_root_path_rewrites_nested_annotations_once(write_org, tmp_path: Path, monkeypatch) -> None:
    write_org("main.org", '#+include: "sub/b.org"\n')
    write_org("sub/b.org", '#+include: "c.org"\n')
    write_org(
        "sub/c.org",
        "#+begin_src sh :tangle yes\n#+end_src\n"
        "#+begin_src sh :tangle root\n#+end_src\n"
        "#+begin_src sh :tangle out/x.sh\n#+end_src\n",
    )
    monkeypatch.chdir(tmp_path)
    cwd = Path.cwd()

    content = resolve("main.org")

    assert f":tangle {cwd / 'sub' / 'c'}\n" in content
    assert f":tangle {cwd / 'main'}\n" in content
    assert f":tangle {cwd / 'sub' / 'out' / 'x.sh'}\n" in content
    assert "sub/sub" not in content


def test_relative_root_path_reports_absolute_dependencies(write_org, tmp_path: Path, monkeypatch) -> None:
    write_org("book/main.org", '#+include: "ch/one.org"\n')
    write_org("book/ch/one.org", "one\n")
    monkeypatch.chdir(tmp_path)

    result = resolve_with_dependencies(Path("book") / "main.org")

    assert result.dependencies == [Path.cwd() / "book" / "ch" / "one.org"]


def test_root_document_annotations_are_left_alone(write_org) -> None:
    root = write_org("main.org", "#+begin_src python :tangle yes\n#+end_src\n")
    assert ":tangle yes\n" in resolve(root)


def test_diamond_includes_are_expanded_each_time(write_org, tmp_path: Path) -> None:
    root = write_org("main.org", '#+include: "left.org"\n#+include: "right.org"\n')
    write_org("left.org", '#+include: "shared.org"\n')
    write_org("right.org", '#+include: "shared.org"\n')
    write_org("shared.org", "SHARED\n")

    result = resolve_with_dependencies(root)

    assert result.content.count("SHARED") == 2
    shared = tmp_path / "shared.org"
    assert result.dependencies.count(shared) == 2
    assert result.dependencies[0] == tmp_path / "left.org"


def test_resolver_resets_dependencies_between_runs(write_org) -> None:
    root = write_org("main.org", '#+include: "b.org"\n')
    write_org("b.org", "b\n")
    resolver = IncludeResolver(root)

    resolver.resolve()
    resolver.resolve()

    assert len(resolver.dependencies) == 1


def test_ancestor_chain_is_immutable(tmp_path: Path) -> None:
    empty = AncestorChain()
    one = empty.extend(tmp_path / "a.org")
    two = one.extend(tmp_path / "b.org")

    assert len(empty) == 0
    assert len(one) == 1
    assert list(two) == [tmp_path / "a.org", tmp_path / "b.org"]
    assert (tmp_path / "b.org") not in one
    assert str(tmp_path / "a.org") in two
    with pytest.raises(dataclasses.FrozenInstanceError):
        one.paths = ()  # type: ignore[misc]
