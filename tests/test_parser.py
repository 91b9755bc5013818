import os

from pish.commands.parser import (
    MISSING_PAREN,
    AndOr,
    Empty,
    Malformed,
    Negate,
    Pipeline,
    Redirect,
    RedirectMode,
    Sequence,
    Simple,
    Subshell,
    parse_chain,
)


def test_simple_command_is_tokenized_on_whitespace() -> None:
    assert parse_chain("  echo   hello\tworld ") == Simple(("echo", "hello", "world"))


def test_blank_chain_is_empty() -> None:
    assert parse_chain("   ") == Empty()


def test_sequence_splits_at_leftmost_semicolon() -> None:
    node = parse_chain("echo a; echo b; echo c")

    assert isinstance(node, Sequence)
    assert node.left == Simple(("echo", "a"))
    assert node.right == Sequence(Simple(("echo", "b")), Simple(("echo", "c")))


def test_sequence_binds_looser_than_conditionals() -> None:
    node = parse_chain("false && echo a; echo b")

    assert node == Sequence(
        AndOr(Simple(("false",)), "&&", Simple(("echo", "a"))),
        Simple(("echo", "b")),
    )


def test_conditionals_split_at_leftmost_operator() -> None:
    node = parse_chain("a || b && c")

    assert node == AndOr(
        Simple(("a",)),
        "||",
        AndOr(Simple(("b",)), "&&", Simple(("c",))),
    )


def test_pipeline_stages_are_flattened_left_to_right() -> None:
    node = parse_chain("echo a | echo b | cat")

    assert node == Pipeline(
        (Simple(("echo", "a")), Simple(("echo", "b")), Simple(("cat",)))
    )


def test_double_bar_is_not_a_pipe() -> None:
    node = parse_chain("false || true | cat")

    assert node == AndOr(
        Simple(("false",)),
        "||",
        Pipeline((Simple(("true",)), Simple(("cat",)))),
    )


def test_operators_inside_parentheses_are_ignored() -> None:
    node = parse_chain("(cd /tmp; pwd) && echo done")

    assert node == AndOr(
        Subshell(Sequence(Simple(("cd", "/tmp")), Simple(("pwd",)))),
        "&&",
        Simple(("echo", "done")),
    )


def test_pipe_inside_subshell_stays_in_subshell() -> None:
    node = parse_chain("(echo a | cat) | wc -l")

    assert node == Pipeline(
        (
            Subshell(Pipeline((Simple(("echo", "a")), Simple(("cat",))))),
            Simple(("wc", "-l")),
        )
    )


def test_output_redirect_defaults_to_stdout() -> None:
    node = parse_chain("echo hi > out.txt")

    assert node == Redirect(Simple(("echo", "hi")), 1, "out.txt", RedirectMode.WRITE)


def test_redirect_modes_and_default_descriptors() -> None:
    assert parse_chain("cat < in").mode is RedirectMode.READ
    assert parse_chain("cat < in").fd == 0
    assert parse_chain("echo x >> log").mode is RedirectMode.APPEND
    assert parse_chain("echo x >> log").fd == 1
    assert parse_chain("cat <> rw").mode is RedirectMode.READ_WRITE
    assert parse_chain("cat <> rw").fd == 0


def test_redirect_flags() -> None:
    assert RedirectMode.WRITE.flags & os.O_TRUNC
    assert RedirectMode.APPEND.flags & os.O_APPEND
    assert RedirectMode.READ.flags == os.O_RDONLY
    assert RedirectMode.READ_WRITE.flags & os.O_CREAT


def test_redirect_descriptor_prefix() -> None:
    node = parse_chain("ls missing 2> err.txt")

    assert node == Redirect(Simple(("ls", "missing")), 2, "err.txt", RedirectMode.WRITE)


def test_descriptor_prefix_must_stand_alone() -> None:
    node = parse_chain("echo file2> out")

    assert node == Redirect(Simple(("echo", "file2")), 1, "out", RedirectMode.WRITE)


def test_long_digit_run_is_not_a_descriptor_prefix() -> None:
    digits = "9" * 15
    node = parse_chain(f"echo {digits}> out")

    assert node == Redirect(Simple(("echo", digits)), 1, "out", RedirectMode.WRITE)
    assert parse_chain(f"echo {digits[:14]}> out").fd == int(digits[:14])


def test_descriptor_prefix_with_append() -> None:
    node = parse_chain("echo x 1>>log")

    assert node == Redirect(Simple(("echo", "x")), 1, "log", RedirectMode.APPEND)


def test_multiple_redirections_nest_rightmost_outermost() -> None:
    node = parse_chain("sort < in.txt > out.txt")

    assert node == Redirect(
        Redirect(Simple(("sort",)), 0, "in.txt", RedirectMode.READ),
        1,
        "out.txt",
        RedirectMode.WRITE,
    )


def test_descriptor_duplication_target_is_kept_verbatim() -> None:
    node = parse_chain("cmd 2>&1")

    assert node == Redirect(Simple(("cmd",)), 2, "&1", RedirectMode.WRITE)


def test_redirect_binds_tighter_than_pipe() -> None:
    node = parse_chain("cat < in | sort > out")

    assert node == Pipeline(
        (
            Redirect(Simple(("cat",)), 0, "in", RedirectMode.READ),
            Redirect(Simple(("sort",)), 1, "out", RedirectMode.WRITE),
        )
    )


def test_negation_wraps_the_rest_of_the_simple_command() -> None:
    assert parse_chain("! false") == Negate(Simple(("false",)))
    assert parse_chain("!false && echo x") == AndOr(
        Negate(Simple(("false",))), "&&", Simple(("echo", "x"))
    )


def test_unterminated_subshell_is_malformed() -> None:
    assert parse_chain("(echo a") == Malformed(MISSING_PAREN)
    assert parse_chain("echo a; (echo b") == Sequence(
        Simple(("echo", "a")), Malformed(MISSING_PAREN)
    )


def test_nested_subshells() -> None:
    assert parse_chain("((echo a))") == Subshell(Subshell(Simple(("echo", "a"))))
