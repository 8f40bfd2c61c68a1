# tests/test_snippets.py

from __future__ import annotations

from rich.cells import cell_len
from rich.style import Style

from gedcom_spans.snippets import Label, LabelRenderer, render_labels, sort_labels
from gedcom_spans.spans import Span


def _label(source: str, fragment: str, message: str, occurrence: int = 0, style: Style = Style()) -> Label:
    start = -1
    for _ in range(occurrence + 1):
        start = source.index(fragment, start + 1)
    offset = len(source[:start].encode("utf-8"))
    return Label(Span(offset, len(fragment.encode("utf-8"))), message, style)


def _render(source: str, labels, **kwargs) -> str:
    return render_labels(source, labels, color=False, **kwargs)


def test_single_label() -> None:
    source = "hello, world!"
    out = _render(source, [_label(source, "hello", "here")])
    assert out == (
        "  ┌\n"
        "1 │ hello, world!\n"
        "  │ ├───┘\n"
        "  │ └╴here\n"
        "  └\n"
    )


def test_source_name_box() -> None:
    source = "hello, world!"
    out = _render(source, [_label(source, "hello", "here")], source_name="test.ged")
    assert out.splitlines()[:3] == [
        "  ┌──────────┐",
        "  │ test.ged │",
        "  ├──────────╯",
    ]


def test_no_labels_renders_nothing() -> None:
    assert _render("hello", []) == ""


def test_enclosing_and_inner_label() -> None:
    source = "hello, world!"
    out = _render(
        source,
        [_label(source, "hello, world!", "outer"), _label(source, "hello", "inner")],
    )
    assert out == (
        "  ┌\n"
        "1 │ hello, world!\n"
        "  │ ├───┘╶──────┘\n"
        "  │ └╴inner\n"
        "  │ └╴outer\n"
        "  └\n"
    )


def test_nested_label() -> None:
    source = "hello, world!"
    out = _render(source, [_label(source, "hello, wo", "outer"), _label(source, "llo", "inner")])
    assert out.splitlines()[2:5] == [
        "  │ ├╴├─┘╶──┘",
        "  │ │ └╴inner",
        "  │ └╴outer",
    ]


def test_adjacent_labels() -> None:
    source = "hello, world!"
    out = _render(source, [_label(source, "world!", "2"), _label(source, "hello, ", "1")])
    assert out.splitlines()[2:5] == [
        "  │ ├─────┘├────┘",
        "  │ └╴1    │",
        "  │        └╴2",
    ]


def test_message_space_over_later_label_is_punched_through() -> None:
    source = "abcdef"
    out = _render(source, [_label(source, "a", "x yz"), _label(source, "d", "q")])
    assert out.splitlines()[2:5] == [
        "  │ ╿  ╿",
        "  │ └╴x╵yz",
        "  │    └╴q",
    ]


def test_combining_characters_take_no_width() -> None:
    source = "he\u0301llo, world!"
    out = _render(source, [_label(source, "llo", "here")])
    assert "  │   ├─┘\n" in out


def test_wide_characters_take_two_columns() -> None:
    source = "日本語 text"
    out = _render(source, [_label(source, "text", "here")])
    assert "  │        ├──┘\n" in out
    assert "  │        └╴here\n" in out


def test_labels_on_two_lines() -> None:
    source = "hello,\nworld!\n"
    out = _render(source, [_label(source, "world", "2"), _label(source, "hello", "1")])
    assert out == (
        "  ┌\n"
        "1 │ hello,\n"
        "  │ ├───┘\n"
        "  │ └╴1\n"
        "2 │ world!\n"
        "  │ ├───┘\n"
        "  │ └╴2\n"
        "  └\n"
    )


def test_context_lines_and_elision() -> None:
    source = "hello\nctx1\nctx2\nctx3\nctx4\nctx5\nworld"
    out = _render(source, [_label(source, "hello", "a"), _label(source, "world", "b")])
    assert out == (
        "  ┌\n"
        "1 │ hello\n"
        "  │ ├───┘\n"
        "  │ └╴a\n"
        "2 │ ctx1\n"
        "3 │ ctx2\n"
        "  │ …\n"
        "5 │ ctx4\n"
        "6 │ ctx5\n"
        "7 │ world\n"
        "  │ ├───┘\n"
        "  │ └╴b\n"
        "  └\n"
    )


def test_context_filling_the_gap_is_not_elided() -> None:
    source = "hello\nc1\nc2\nc3\nc4\nworld"
    out = _render(source, [_label(source, "hello", "a"), _label(source, "world", "b")])
    assert "…" not in out
    assert out == (
        "  ┌\n"
        "1 │ hello\n"
        "  │ ├───┘\n"
        "  │ └╴a\n"
        "2 │ c1\n"
        "3 │ c2\n"
        "4 │ c3\n"
        "5 │ c4\n"
        "6 │ world\n"
        "  │ ├───┘\n"
        "  │ └╴b\n"
        "  └\n"
    )


def test_no_context_lines() -> None:
    source = "one\ntwo\nthree\n"
    out = _render(source, [_label(source, "two", "here")], context_lines=0)
    assert out == (
        "  ┌\n"
        "2 │ two\n"
        "  │ ├─┘\n"
        "  │ └╴here\n"
        "  └\n"
    )


def test_multiline_label() -> None:
    source = "hello,\nworld!"
    out = _render(source, [Label(Span(0, len(source)), "msg")])
    assert out == (
        "  ┌\n"
        "1 ┢╸hello,\n"
        "2 ┃ world!\n"
        "  ┡━╸msg\n"
        "  └\n"
    )


def test_gutter_fits_widest_line_number() -> None:
    source = "\n".join(f"line{i}" for i in range(1, 11)) + "\nline in question"
    out = _render(source, [_label(source, "question", "here")])
    assert out == (
        "   ┌\n"
        " 9 │ line9\n"
        "10 │ line10\n"
        "11 │ line in question\n"
        "   │         ├──────┘\n"
        "   │         └╴here\n"
        "   └\n"
    )


def test_max_width_wraps_long_messages() -> None:
    source = "hello, world!"
    message = "lorem ipsum dolor sit amet consectetur adipiscing"
    out = _render(source, [_label(source, "hello", message)], max_width=20)
    lines = out.splitlines()
    assert len(lines) > 5
    assert all(cell_len(line) <= 20 for line in lines)


def test_color_output_uses_label_style() -> None:
    source = "hello, world!"
    label = _label(source, "hello", "here", style=Style(color="blue"))
    out = render_labels(source, [label], color=True)
    assert "\x1b[34mhello\x1b[0m" in out
    assert "\x1b[34m├───┘\x1b[0m" in out


def test_spans_are_widened_to_whole_characters() -> None:
    source = "Åsa"
    # a span starting inside the two bytes of "Å"
    out = _render(source, [Label(Span(1, 1), "here")])
    assert "  │ ╿\n" in out


def test_renderer_accepts_bytes() -> None:
    renderer = LabelRenderer(b"0 HEAD\n2 TAG\n")
    out = renderer.render([Label(Span(7, 1), "bad level")], color=False)
    assert "2 │ 2 TAG\n" in out
    assert "  │ ╿\n" in out
    assert renderer.line_containing_start_of(Span(8, 1)) == Span(7, 6)


def test_sort_labels_pops_outer_first() -> None:
    inner = Label(Span(0, 2), "inner")
    outer = Label(Span(0, 5), "outer")
    later = Label(Span(3, 1), "later")
    labels = [later, inner, outer]
    sort_labels(labels)
    assert [labels.pop().message for _ in range(3)] == ["outer", "inner", "later"]


def test_partially_overlapping_labels() -> None:
    source = "hello, world!"
    out = _render(source, [_label(source, "hello, w", "a"), _label(source, "lo, world", "b")])
    # the later label takes over where it starts
    assert out == (
        "  ┌\n"
        "1 │ hello, world!\n"
        "  │ ├─┘├───────┘\n"
        "  │ └╴a│\n"
        "  │    └╴b\n"
        "  └\n"
    )


def test_label_at_end_of_source_stays_on_last_line() -> None:
    source = "hello, world!"
    labels = [_label(source, "hello", "here"), Label(Span(len(source), 0), "eof")]
    out = _render(source, labels)
    assert out.count("1 │ hello, world!") == 1
    assert out == (
        "  ┌\n"
        "1 │ hello, world!\n"
        "  │ ├───┘" + " " * 8 + "│\n"
        "  │ └╴here" + " " * 7 + "│\n"
        "  │" + " " * 14 + "└╴eof\n"
        "  └\n"
    )

    # spans past the end are clamped onto the last line as well
    clamped = _render(source, [_label(source, "hello", "here"), Label(Span(40, 3), "eof")])
    assert clamped == out


# ---------- Labels covering several lines ----------

def test_multiline_with_inner_labels() -> None:
    source = "hello,\nworld!\n"
    out = _render(
        source,
        [
            _label(source, "hello,\nworld!", "this here thing is a full message"),
            _label(source, "ll", "some Ls here"),
            _label(source, "or", "OR or AND?"),
        ],
    )
    assert out == (
        "  ┌\n"
        "1 ┢╸hello,\n"
        "  ┃   ├┘\n"
        "  ┃   └╴some Ls here\n"
        "2 ┃ world!\n"
        "  ┃  ├┘\n"
        "  ┃  └╴OR or AND?\n"
        "  ┡━╸this here thing is a full message\n"
        "  └\n"
    )


def test_nested_multiline_labels() -> None:
    source = "line1\nline2\nline3\n"
    out = _render(
        source,
        [
            _label(source, "line1\nline2", "lines one and two"),
            _label(source, "line1\nline2\nline3", "lines one and two and three"),
        ],
    )
    assert out == (
        "  ┌\n"
        "1 ┢╸line1\n"
        "2 ┃ line2\n"
        "  ┣━╸lines one and two\n"
        "3 ┃ line3\n"
        "  ┡━╸lines one and two and three\n"
        "  └\n"
    )


def test_overlapping_multiline_labels() -> None:
    source = "line1\nline2\nline3\n"
    out = _render(
        source,
        [
            _label(source, "line1\nline2", "lines one and two"),
            _label(source, "line2\nline3", "lines two and three"),
        ],
    )
    assert out == (
        "  ┌\n"
        "1 ┢╸line1\n"
        "2 ┣╸line2\n"
        "  ┣━╸lines one and two\n"
        "3 ┃ line3\n"
        "  ┡━╸lines two and three\n"
        "  └\n"
    )


def test_renderers_do_not_share_a_console() -> None:
    assert LabelRenderer("a").console is not LabelRenderer("b").console
