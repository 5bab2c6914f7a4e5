from toc_utils import build_toc, format_toc, normalize_levels, scan_headings


def _doc(*headings):
    """Build a document from (level, id, text) tuples."""
    return "\n".join(f'<h{level} id="{anchor}">{text}</h{level}>' for level, anchor, text in headings)


def test_scan_open_mode_reports_levels_attributes_and_offsets():
    text = '<h1>Title</h1>\n<h2 class="a">Sub <em>x</em></h2>\n<h3>Skip</h3>'
    headings = scan_headings(text, ["1", "2"])

    assert [h.level for h in headings] == [1, 2]
    first, second = headings
    assert (first.start, first.end) == (0, 14)
    assert first.attributes == ""
    assert first.identifier is None
    assert second.attributes == ' class="a"'
    assert second.inner_content == "Sub <em>x</em>"
    assert second.text == "Sub x"
    assert all(text[h.start:h.end] == h.raw for h in headings)


def test_scan_is_case_insensitive_and_non_greedy():
    headings = scan_headings("<H2>Up</H2><h2>A</h2><h2>B</h2>", ["2"])
    assert [h.text for h in headings] == ["Up", "A", "B"]


def test_scan_with_no_levels_or_bad_input_finds_nothing():
    assert scan_headings("<h1>T</h1>", []) == []
    assert scan_headings("<h1>T</h1>", ["7", "x", ""]) == []
    assert scan_headings("", ["1"]) == []
    assert scan_headings("<h2>Unterminated", ["2"]) == []


def test_normalize_levels_accepts_ints_and_drops_duplicates():
    assert normalize_levels([1, "2", "2", " 3 ", "0", "10"]) == ["1", "2", "3"]


def test_scan_identifier_mode_only_matches_headers_with_ids():
    text = '<h2 class="x" id="intro" data-a="1">Intro</h2><h2>No id</h2>'
    headings = scan_headings(text, ["2"], with_identifier=True)

    assert len(headings) == 1
    assert headings[0].identifier == "intro"
    assert 'class="x"' in headings[0].attributes
    assert 'data-a="1"' in headings[0].attributes


def test_toc_nesting_follows_levels():
    text = _doc((1, "a", "A"), (2, "b", "B"), (3, "c", "C"), (2, "d", "D"), (1, "e", "E"))
    expected = "\n".join([
        "<ul>",
        '  <li><a href="#a">A</a></li>',
        "  <ul>",
        '    <li><a href="#b">B</a></li>',
        "    <ul>",
        '      <li><a href="#c">C</a></li>',
        "    </ul>",
        '    <li><a href="#d">D</a></li>',
        "  </ul>",
        '  <li><a href="#e">E</a></li>',
        "</ul>",
    ]) + "\n"

    toc = build_toc(text, ["1", "2", "3"])
    assert toc == expected
    assert toc.count("<ul>") == 3
    assert toc.count("</ul>") == 3


def test_toc_bridges_level_gaps():
    toc = build_toc(_doc((1, "a", "A"), (4, "b", "B")), ["1", "4"])
    assert toc.splitlines() == [
        "<ul>",
        '  <li><a href="#a">A</a></li>',
        "  <ul>",
        "    <ul>",
        "      <ul>",
        '        <li><a href="#b">B</a></li>',
        "      </ul>",
        "    </ul>",
        "  </ul>",
        "</ul>",
    ]


def test_no_toc_headers_are_invisible_to_nesting():
    text = (
        '<h1 id="a">A</h1>\n'
        '<h3 class="foo no-toc bar" id="hidden">Hidden</h3>\n'
        '<h2 id="c">C</h2>'
    )
    toc = build_toc(text, ["1", "2", "3"])

    assert "hidden" not in toc
    assert toc == format_toc([(1, "a", "A"), (2, "c", "C")])


def test_toc_skips_headers_without_ids_and_strips_tags():
    text = '<h1 id="api">The <code>API</code></h1><h1>Untitled</h1>'
    assert build_toc(text, ["1"]) == '<ul>\n  <li><a href="#api">The API</a></li>\n</ul>\n'


def test_toc_is_empty_without_qualifying_headers():
    assert build_toc("<p>No headers</p>", ["1", "2"]) == ""
    assert build_toc(_doc((1, "a", "A")), []) == ""
