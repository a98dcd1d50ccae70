"""Unit tests for LogSink and LogChannel"""

import io
from datetime import datetime

from rich.console import Console

from buildhooks.log_sink import LogChannel, LogSink


def fixed_clock():
    return datetime(2026, 10, 19, 14, 30, 5)


def test_write_formats_timestamp_and_message():
    channel = LogChannel("BuildHooks", clock=fixed_clock)

    entry = channel.write("Starting PreBuild")

    assert entry == "2026-10-19 14:30:05:Starting PreBuild\n"
    assert channel.entries == [entry]
    assert channel.text() == entry


def test_entries_are_append_only_copies():
    channel = LogChannel("BuildHooks", clock=fixed_clock)
    channel.write("one")

    entries = channel.entries
    entries.append("tampered")

    assert len(channel.entries) == 1


def test_contains_matches_fragments():
    channel = LogChannel("BuildHooks")
    channel.write("[PreBuild] ok")

    assert "[PreBuild] ok" in channel
    assert "PostBuild" not in channel


def test_sink_write_creates_channel_on_first_use():
    sink = LogSink(clock=fixed_clock)

    sink.write("BuildHooks", "hello")

    channel = sink.get("BuildHooks")
    assert channel is not None
    assert channel.visible is True
    assert channel.clear_with_session is False
    assert channel.entries == ["2026-10-19 14:30:05:hello\n"]


def test_create_channel_returns_existing():
    sink = LogSink()

    first = sink.create_channel("BuildHooks")
    second = sink.create_channel("BuildHooks", visible=False)

    assert first is second
    assert second.visible is True
    assert sink.channel_names == ["BuildHooks"]


def test_reset_session_keeps_persistent_channels():
    sink = LogSink()
    persistent = sink.create_channel("BuildHooks")
    transient = sink.create_channel("Scratch", clear_with_session=True)
    persistent.write("kept")
    transient.write("dropped")

    sink.reset_session()

    assert "kept" in persistent
    assert transient.entries == []


def test_visible_channel_echoes_to_console():
    buffer = io.StringIO()
    sink = LogSink(console=Console(file=buffer, width=200), clock=fixed_clock)

    sink.write("BuildHooks", "[PreBuild] ok")

    assert "2026-10-19 14:30:05:[PreBuild] ok" in buffer.getvalue()


def test_hidden_channel_does_not_echo():
    buffer = io.StringIO()
    sink = LogSink(console=Console(file=buffer, width=200))

    sink.create_channel("Quiet", visible=False).write("secret")

    assert buffer.getvalue() == ""
