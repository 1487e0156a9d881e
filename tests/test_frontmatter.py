from datetime import datetime, timedelta, timezone

import pytest

from windvane.errors import ParseError
from windvane.frontmatter import DEFAULT_DATE, PageMetadata, parse_date, parse_front_matter


def test_header_is_parsed_and_removed():
    text = (
        "###\n"
        "title: Hello World\n"
        "date: 20 Mar 15 15:35 PDT\n"
        "category: computers\n"
        "###\n"
        "Body line\n"
        "\n"
        "More body"
    )
    metadata, body = parse_front_matter(text)
    assert metadata.title == "Hello World"
    assert metadata.date == datetime(2015, 3, 20, 15, 35, tzinfo=timezone(timedelta(hours=-7)))
    assert metadata.category == "computers"
    assert body == "Body line\n\nMore body"


def test_no_header_keeps_body_verbatim():
    text = "# Just markdown\n\nNo header here.\n###\n"
    metadata, body = parse_front_matter(text)
    assert metadata == PageMetadata()
    assert metadata.date == DEFAULT_DATE
    assert body == text


def test_unknown_keys_are_ignored_and_values_keep_colons():
    text = "###\nauthor: someone\ntitle:   Re: things  \n###\nbody"
    metadata, body = parse_front_matter(text)
    assert metadata.title == "Re: things"
    assert metadata.category == ""
    assert body == "body"


def test_empty_header_gives_defaults():
    metadata, body = parse_front_matter("###\n###\nbody")
    assert metadata == PageMetadata()
    assert body == "body"


def test_windows_line_endings_in_header():
    metadata, body = parse_front_matter("###\r\ntitle: Crlf\r\n###\r\nbody")
    assert metadata.title == "Crlf"
    assert body == "body"


def test_bad_date_is_parse_error(tmp_path):
    source = tmp_path / "post.md"
    with pytest.raises(ParseError) as excinfo:
        parse_front_matter("###\ntitle: T\ndate: not-a-date\n###\n", source)
    assert excinfo.value.source_path == source
    assert "not-a-date" in excinfo.value.message


def test_unclosed_header_is_parse_error():
    with pytest.raises(ParseError, match="Reached end of input"):
        parse_front_matter("###\ntitle: Never closed\nbody text: here")


def test_header_line_without_colon_is_parse_error():
    with pytest.raises(ParseError, match="key: value"):
        parse_front_matter("###\ntitle: T\njust words\n###\nbody")


def test_parse_date_variants():
    utc = timezone.utc
    assert parse_date("01 Jun 24 00:00 UTC") == datetime(2024, 6, 1, tzinfo=utc)
    assert parse_date("Sat, 01 Jun 2024 12:30:15 +0200") == datetime(
        2024, 6, 1, 12, 30, 15, tzinfo=timezone(timedelta(hours=2))
    )
    unknown_zone = parse_date("01 Jan 23 10:00 XYZ")
    assert unknown_zone == datetime(2023, 1, 1, 10, 0, tzinfo=utc)
    assert unknown_zone.tzinfo is not None


def test_date_without_zone_is_parse_error():
    with pytest.raises(ParseError, match="missing zone"):
        parse_date("20 Mar 15 15:35")
    with pytest.raises(ParseError):
        parse_front_matter("###\ntitle: T\ndate: Fri, 20 Mar 2015 15:35:00\n###\n")
