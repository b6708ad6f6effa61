"""Tests for the HTML markup writer."""

import io

import pytest

from config_diffgram.markup import HtmlMarkupWriter, escape_html


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def writer(stream):
    return HtmlMarkupWriter(stream)


def test_escape_html():
    assert escape_html("<a & 'b'>") == "&lt;a &amp; &#x27;b&#x27;&gt;"
    assert escape_html('"x"') == "&quot;x&quot;"


def test_nested_elements_with_attributes(writer, stream):
    writer.begin_element("td")
    writer.write_attribute("class", "Added")
    writer.write_attribute("rowspan", "2")
    writer.begin_element("a")
    writer.write_attribute("href", "#b1_00")
    writer.write_text("R1")
    writer.end_element("a")
    writer.end_element("td")

    assert stream.getvalue() == '<td class="Added" rowspan="2"><a href="#b1_00">R1</a></td>'
    assert writer.depth == 0


def test_empty_element(writer, stream):
    writer.begin_element("td")
    writer.end_element("td")
    assert stream.getvalue() == "<td></td>"


def test_text_and_attributes_escaped(writer, stream):
    writer.begin_element("p")
    writer.write_attribute("title", 'say "hi"')
    writer.write_text("a < b")
    writer.end_element("p")
    assert stream.getvalue() == '<p title="say &quot;hi&quot;">a &lt; b</p>'


def test_write_raw_not_escaped(writer, stream):
    writer.write_raw("<!DOCTYPE html>")
    writer.write_line()
    assert stream.getvalue() == "<!DOCTYPE html>\n"


def test_attribute_outside_start_tag(writer):
    writer.begin_element("p")
    writer.write_text("x")
    with pytest.raises(ValueError, match="outside of a start tag"):
        writer.write_attribute("class", "Added")


def test_mismatched_end_element(writer):
    writer.begin_element("tr")
    writer.begin_element("td")
    with pytest.raises(ValueError, match="Cannot close <tr>"):
        writer.end_element("tr")


def test_end_without_open_element(writer):
    with pytest.raises(ValueError, match="open element is <None>"):
        writer.end_element("table")
