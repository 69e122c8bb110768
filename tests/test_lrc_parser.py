import pytest

from lyric_scroll.lrc_parser import LRCParser, LyricLine, Timeline, format_timestamp, parse


def test_parse_basic_tags_to_milliseconds():
    timeline = parse("[00:01.00]A\n[00:02.50]B")
    assert [(line.timestamp_ms, line.text) for line in timeline] == [(1000, "A"), (2500, "B")]


def test_parse_assigns_ids_by_sorted_position():
    timeline = parse("[00:03.00]C\n[00:01.00]A\n[00:02.00]B")
    assert [line.id for line in timeline] == [0, 1, 2]
    assert [line.text for line in timeline] == ["A", "B", "C"]


@pytest.mark.parametrize(
    "tag, expected_ms",
    [
        ("[00:01.5]", 1500),
        ("[00:01.25]", 1250),
        ("[00:01.123]", 1123),
        ("[00:01.1239]", 1123),
        ("[01:02]", 62000),
        ("[00:01:50]", 1500),
        ("[100:00.00]", 6000000),
    ],
)
def test_fraction_is_truncated_to_milliseconds(tag, expected_ms):
    timeline = parse(f"{tag}line")
    assert timeline[0].timestamp_ms == expected_ms


def test_multiple_tags_expand_into_lines_with_same_text():
    timeline = parse("[00:12.00][00:24.00] Chorus\n[00:18.00]Verse")
    assert [(line.timestamp_ms, line.text) for line in timeline] == [
        (12000, "Chorus"),
        (18000, "Verse"),
        (24000, "Chorus"),
    ]


def test_whitespace_between_leading_tags_is_allowed():
    timeline = parse("[00:01.00] [00:05.00]  Hello  ")
    assert [line.text for line in timeline] == ["Hello", "Hello"]
    assert timeline.timestamps == (1000, 5000)


def test_only_leading_tags_count():
    timeline = parse("[00:01.00]hello [00:09.00] there")
    assert len(timeline) == 1
    assert timeline[0].text == "hello [00:09.00] there"


def test_duplicate_timestamps_keep_textual_order():
    timeline = parse("[00:05.00]first\n[00:01.00]early\n[00:05.00]second\n[00:05.00]third")
    assert [line.text for line in timeline] == ["early", "first", "second", "third"]


def test_empty_text_is_kept_as_instrumental_gap():
    timeline = parse("[00:01.00]Sing\n[00:04.00]\n[00:08.00]Again")
    assert [line.text for line in timeline] == ["Sing", "", "Again"]


def test_lines_without_tags_are_dropped():
    timeline = parse("Just some text\n[by:someone]\n[00:01.00]Real\n[xx:yy.zz]Bad\n[00:01.00")
    assert [line.text for line in timeline] == ["Real"]


def test_metadata_tags_are_captured(sample_timeline):
    assert sample_timeline.title == "Sample Song"
    assert sample_timeline.artist == "Sample Artist"
    assert sample_timeline.album == "Sample Album"
    assert len(sample_timeline) == 3


@pytest.mark.parametrize("value, expected", [("+500", 500), ("-250", -250), ("abc", 0), ("", 0)])
def test_offset_tag(value, expected):
    timeline = parse(f"[offset:{value}]\n[00:01.00]x")
    assert timeline.offset_ms == expected


@pytest.mark.parametrize(
    "text",
    [
        "",
        "\n\n",
        "[",
        "]]][[[",
        "[00:",
        "[00:01.00",
        "\r\n[00:01.00]a\r\n",
        "\x00\ufeff",
        "[:]",
        "[" + "1" * 5000 + ":00.00]boom\n[00:01.00]ok",
        "[offset:" + "9" * 5000 + "]\n[00:01.00]ok",
    ],
)
def test_parse_is_total(text):
    timeline = parse(text)
    assert isinstance(timeline, Timeline)
    stamps = timeline.timestamps
    assert list(stamps) == sorted(stamps)


def test_oversized_minutes_field_is_not_a_timestamp():
    timeline = parse("[" + "1" * 5000 + ":00.00]boom\n[00:01.00]ok")
    assert [(line.timestamp_ms, line.text) for line in timeline] == [(1000, "ok")]


def test_oversized_offset_tag_is_ignored():
    timeline = parse("[offset:" + "9" * 5000 + "]\n[00:01.00]ok")
    assert timeline.offset_ms == 0
    assert len(timeline) == 1


def test_crlf_input():
    timeline = parse("[00:01.00]a\r\n[00:02.00]b\r\n")
    assert [line.text for line in timeline] == ["a", "b"]


def test_empty_timeline():
    timeline = parse("")
    assert len(timeline) == 0
    assert timeline.duration_ms == 0
    assert timeline.line_at(1000) == (-1, None)


def test_timeline_is_immutable(sample_timeline):
    with pytest.raises(AttributeError):
        sample_timeline.lines = ()


def test_line_at_and_context(sample_timeline):
    idx, line = sample_timeline.line_at(2500)
    assert idx == 1
    assert line.text == "Second line"

    context = sample_timeline.context_lines(1, before=1, after=5)
    assert [rel for rel, _ in context] == [-1, 0, 1]
    assert sample_timeline.context_lines(-1) == []


def test_format_timestamp_truncates_to_centiseconds():
    assert format_timestamp(62509) == "[01:02.50]"
    assert str(LyricLine(id=0, timestamp_ms=1000, text="A")) == "[00:01.00]A"


def test_to_lrc_writes_metadata_and_lines():
    timeline = parse("[ti:T]\n[offset:+300]\n[00:02.00]B\n[00:01.00]A")
    text = LRCParser.to_lrc(timeline)
    assert text == "[ti:T]\n[offset:+300]\n\n[00:01.00]A\n[00:02.00]B"

    reparsed = parse(text)
    assert reparsed.title == "T"
    assert reparsed.offset_ms == 300
    assert [line.text for line in reparsed] == ["A", "B"]
