"""Unit tests for headings.py"""

from postgen.headings import index_headings
from postgen.models import Heading


def test_duplicate_headings_get_numeric_suffix():
    html, headings = index_headings("<h2>Setup</h2><p>x</p><h2>Setup</h2>")
    assert [h.id for h in headings] == ["setup", "setup-2"]
    assert '<h2 id="setup">Setup</h2>' in html
    assert '<h2 id="setup-2">Setup</h2>' in html


def test_only_levels_two_and_three_are_indexed():
    source = "<h1>Title</h1><h2>Two</h2><h3>Three</h3><h4>Four</h4>"
    html, headings = index_headings(source)
    assert headings == [Heading(2, "Two", "two"), Heading(3, "Three", "three")]
    assert "<h1>Title</h1>" in html
    assert "<h4>Four</h4>" in html


def test_existing_id_is_preferred():
    html, headings = index_headings('<h3 class="x" id="custom">Thing</h3>')
    assert headings[0].id == "custom"
    assert html == '<h3 class="x" id="custom">Thing</h3>'


def test_text_strips_markup_and_entities():
    html, headings = index_headings("<h2>Q&amp;A <code>x</code>\n  notes</h2>")
    assert headings[0].text == "Q A x notes"
    assert headings[0].id == "q-a-x-notes"


def test_headings_without_text_are_left_alone():
    source = '<h2><img src="a.png"></h2><h2>Real</h2>'
    html, headings = index_headings(source)
    assert '<h2><img src="a.png"></h2>' in html
    assert headings == [Heading(2, "Real", "real")]


def test_empty_slug_falls_back_to_position():
    _, headings = index_headings("<h2>Intro</h2><h3>???</h3>")
    assert [h.id for h in headings] == ["intro", "section-2"]


def test_ids_stay_unique_when_suffix_is_taken():
    _, headings = index_headings("<h2>Setup 2</h2><h2>Setup</h2><h2>Setup</h2>")
    ids = [h.id for h in headings]
    assert ids == ["setup-2", "setup", "setup-3"]
    assert len(set(ids)) == len(ids)


def test_rendered_markdown_headings(renderer):
    html = renderer.parse("## Install\n\ntext\n\n### Install {#install-step}\n\n## Install\n")
    html, headings = index_headings(html)
    assert [h.id for h in headings] == ["install", "install-step", "install-2"]
