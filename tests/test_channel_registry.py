from __future__ import annotations

import logging

import pytest

from irctab.irc.channels import ChannelRegistry


@pytest.fixture
def registry(sink):
    return ChannelRegistry(sink)


def test_add_creates_empty_channel_and_opens_window(registry, sink):
    chan = registry.add("#python")
    assert chan is not None
    assert chan.name == "#python"
    assert chan.topic is None
    assert chan.nicks == []
    assert "#python" in registry
    assert sink.opened == ["#python"]


def test_add_twice_returns_existing_entry(registry, sink):
    first = registry.add("#python")
    second = registry.add("#python")
    assert first is second
    assert len(registry) == 1
    assert sink.opened == ["#python"]


def test_add_keeps_password(registry):
    chan = registry.add("#secret", "hunter2")
    assert chan.password == "hunter2"


def test_add_window_failure_reports_and_aborts(registry, sink):
    sink.fail_open = True
    assert registry.add("#python") is None
    assert "#python" not in registry
    assert sink.lines_for("status") == ["Allocation failure"]


def test_remove_deletes_entry_and_ignores_unknown(registry):
    registry.add("#a")
    registry.remove("#a")
    registry.remove("#a")
    registry.remove("#never")
    assert len(registry) == 0


def test_lookup_unknown_reports_to_status(registry, sink):
    assert registry.lookup("#nope") is None
    assert sink.lines_for("status") == ["Channel '#nope' does not exist!"]


def test_get_unknown_is_silent(registry, sink):
    assert registry.get("#nope") is None
    assert sink.lines == []


def test_operations_on_unknown_channel_do_not_mutate(registry):
    registry.add("#known")
    registry.set_topic("#ghost", "boo")
    registry.add_nick("#ghost", "alice")
    registry.add_nicks("#ghost", "alice bob")
    registry.remove_nick("#ghost", "alice")
    assert registry.format_nicks("#ghost") is None
    assert registry.names() == ["#known"]
    assert registry.get("#known").nicks == []


def test_add_nicks_ignores_repeated_spaces(registry):
    registry.add("#c")
    registry.add_nicks("#c", "alice bob   carol")
    assert registry.get("#c").nicks == ["alice", "bob", "carol"]


def test_add_nick_appends_in_order(registry):
    registry.add("#c")
    registry.add_nick("#c", "alice")
    registry.add_nick("#c", "bob")
    assert registry.get("#c").nicks == ["alice", "bob"]


def test_format_nicks_operator_and_regular(registry):
    registry.add("#c")
    registry.add_nicks("#c", "@alice bob")
    assert registry.format_nicks("#c") == "[alice] [ bob]"


def test_format_nicks_empty_list(registry):
    registry.add("#c")
    assert registry.format_nicks("#c") == ""


def test_remove_nick_leaves_list_unchanged(registry, caplog):
    registry.add("#c")
    registry.add_nicks("#c", "alice bob")
    with caplog.at_level(logging.DEBUG, logger="irctab"):
        registry.remove_nick("#c", "alice")
    assert registry.get("#c").nicks == ["alice", "bob"]
    assert any("alice left" in r.getMessage() for r in caplog.records)


def test_set_topic_replaces_and_clears(registry):
    registry.add("#c")
    registry.set_topic("#c", "hello")
    assert registry.get("#c").topic == "hello"
    registry.set_topic("#c", None)
    assert registry.get("#c").topic is None


def test_append_routes_to_channel_window(registry, sink):
    registry.add("#c")
    assert registry.append("#c", "hi") is True
    assert registry.append("#gone", "hi") is False
    assert sink.lines == [("#c", "hi"), ("status", "Channel '#gone' does not exist!")]


def test_clear_nicks(registry):
    registry.add("#c")
    registry.add_nicks("#c", "a b")
    registry.clear_nicks("#c")
    registry.clear_nicks("#missing")
    assert registry.get("#c").nicks == []


def test_iteration_is_a_snapshot(registry):
    registry.add("#a")
    registry.add("#b")
    for chan in registry:
        registry.remove(chan.name)
    assert len(registry) == 0
