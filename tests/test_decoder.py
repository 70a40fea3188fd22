from __future__ import annotations

import logging
import time

import pytest

from irctab.irc.decoder import TOPIC_DATE_FORMAT, format_topic_time
from irctab.irc.models import (
    ChannelMessageEvent,
    ConnectEvent,
    ConnectionState,
    JoinEvent,
    NickEvent,
    NumericEvent,
    PartEvent,
    TopicEvent,
)


async def dispatch(session, *events):
    for event in events:
        await session.decoder.dispatch(event)


@pytest.mark.asyncio
async def test_connect_without_autojoin_joins_nothing(online_session, transport):
    online_session.state = ConnectionState.CONNECTING
    await dispatch(online_session, ConnectEvent())
    assert online_session.state == ConnectionState.CONNECTED
    assert transport.sent == []
    assert len(online_session.registry) == 0


@pytest.mark.asyncio
async def test_connect_joins_autojoin_with_passwords(online_session, transport):
    online_session.config.autojoin = [
        {"channel": "#open"},
        {"channel": "#locked", "password": "key"},
    ]
    await dispatch(online_session, ConnectEvent())
    assert transport.sent == ["JOIN #open", "JOIN #locked key"]
    assert online_session.registry.names() == ["#open", "#locked"]


@pytest.mark.asyncio
async def test_connect_rejoins_channels_kept_from_previous_connection(
    online_session, transport
):
    online_session.registry.add("#kept", "pw")
    online_session.config.autojoin = [{"channel": "#auto"}]
    await dispatch(online_session, ConnectEvent())
    assert transport.sent == ["JOIN #auto", "JOIN #kept pw"]


@pytest.mark.asyncio
async def test_join_by_other_nick_adds_to_list(online_session, sink):
    online_session.registry.add("#c")
    await dispatch(online_session, JoinEvent(nick="bob", origin="bob!b@h", channel="#c"))
    assert sink.lines_for("#c") == ["bob [bob!b@h] has joined #c"]
    assert online_session.registry.get("#c").nicks == ["bob"]


@pytest.mark.asyncio
async def test_own_join_is_not_added_to_list(online_session, sink):
    online_session.registry.add("#c")
    await dispatch(online_session, JoinEvent(nick="me", origin="me!m@h", channel="#c"))
    assert sink.lines_for("#c") == ["me [me!m@h] has joined #c"]
    assert online_session.registry.get("#c").nicks == []


@pytest.mark.asyncio
async def test_join_for_unknown_channel_reports(online_session, sink):
    await dispatch(online_session, JoinEvent(nick="bob", origin="bob!b@h", channel="#x"))
    assert "Channel '#x' does not exist!" in sink.lines_for("status")
    assert "#x" not in online_session.registry


@pytest.mark.asyncio
async def test_part_appends_and_keeps_stale_list(online_session, sink):
    online_session.registry.add("#c")
    online_session.registry.add_nicks("#c", "bob")
    await dispatch(online_session, PartEvent(nick="bob", origin="bob!b@h", channel="#c"))
    assert sink.lines_for("#c") == ["bob [bob!b@h] has quit [Connection closed]"]
    assert online_session.registry.get("#c").nicks == ["bob"]


@pytest.mark.asyncio
async def test_nick_change_is_only_logged(online_session, sink, caplog):
    online_session.registry.add("#c")
    online_session.registry.add_nicks("#c", "bob")
    with caplog.at_level(logging.INFO, logger="irctab"):
        await dispatch(online_session, NickEvent(old_nick="bob", new_nick="rob", origin="bob!b@h"))
    assert sink.lines == []
    assert online_session.registry.get("#c").nicks == ["bob"]
    assert any("bob is now known as rob" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_channel_message(online_session, sink):
    online_session.registry.add("#c")
    await dispatch(online_session, ChannelMessageEvent(channel="#c", nick="bob", text="hi"))
    assert sink.lines_for("#c") == ["<bob> hi"]


@pytest.mark.asyncio
async def test_topic_change_updates_before_line(online_session, sink):
    online_session.registry.add("#c")
    online_session.on_target_switched("#c")
    sink.topics.clear()
    await dispatch(online_session, TopicEvent(channel="#c", topic="new", nick="bob"))
    assert online_session.registry.get("#c").topic == "new"
    assert sink.topics == ["new"]
    assert sink.lines_for("#c") == ["bob changed topic to 'new'"]


@pytest.mark.asyncio
async def test_topic_change_for_inactive_channel_does_not_touch_display(online_session, sink):
    online_session.registry.add("#c")
    await dispatch(online_session, TopicEvent(channel="#c", topic="new", nick="bob"))
    assert sink.topics == []


@pytest.mark.asyncio
async def test_server_info_numerics(online_session, sink):
    await dispatch(
        online_session,
        NumericEvent(code=372, params=("me", "- message of the day")),
        NumericEvent(code=251, params=("me", "There are", "5 users")),
        NumericEvent(code=396, params=("me", "host.example", "is now your displayed host")),
        NumericEvent(code=375, params=("me",)),
    )
    assert sink.lines_for("status") == [
        "- message of the day",
        "There are 5 users",
        "host.example is now your displayed host",
    ]


@pytest.mark.asyncio
async def test_param_list_numerics(online_session, sink):
    await dispatch(
        online_session,
        NumericEvent(code=4, params=("me", "irc.example.org", "ircd-1.0", "iow", "beI")),
        NumericEvent(code=5, params=("me", "CHANTYPES=#", "are supported by this server")),
    )
    assert sink.lines_for("status") == [
        "irc.example.org ircd-1.0 iow beI",
        "CHANTYPES=# are supported by this server",
    ]


@pytest.mark.asyncio
async def test_names_then_end_of_names(online_session, sink):
    online_session.registry.add("#test")
    await dispatch(
        online_session,
        NumericEvent(code=353, params=("me", "=", "#test", "x y z")),
        NumericEvent(code=366, params=("me", "#test", "End of /NAMES list.")),
    )
    line = online_session.registry.format_nicks("#test")
    for name in ("x", "y", "z"):
        assert line.count(f"[ {name}]") == 1
    assert sink.lines_for("#test") == ["[Users #test]", "[ x] [ y] [ z]"]


@pytest.mark.asyncio
async def test_topic_reply_and_who_time(online_session, sink):
    online_session.registry.add("#c")
    stamp = 1700000000
    await dispatch(
        online_session,
        NumericEvent(code=332, params=("me", "#c", "Welcome!")),
        NumericEvent(code=333, params=("me", "#c", "bob!b@h", str(stamp))),
    )
    expected_date = time.strftime(TOPIC_DATE_FORMAT, time.localtime(stamp))
    assert online_session.registry.get("#c").topic == "Welcome!"
    assert sink.lines_for("#c") == [
        "Topic for #c: Welcome!",
        f"Topic set by bob [bob!b@h] [{expected_date}]",
    ]


@pytest.mark.asyncio
async def test_topic_who_time_bad_timestamp_uses_empty_date(online_session, sink):
    online_session.registry.add("#c")
    await dispatch(online_session, NumericEvent(code=333, params=("me", "#c", "bob", "soon")))
    assert sink.lines_for("#c") == ["Topic set by bob [bob] []"]


@pytest.mark.asyncio
async def test_short_numerics_are_ignored(online_session, sink):
    online_session.registry.add("#c")
    await dispatch(
        online_session,
        NumericEvent(code=332, params=("me", "#c")),
        NumericEvent(code=333, params=("me", "#c", "bob")),
        NumericEvent(code=353, params=("me", "=", "#c")),
        NumericEvent(code=366, params=("me",)),
        NumericEvent(code=482, params=("me", "#c")),
    )
    assert sink.lines == []
    assert online_session.registry.get("#c").topic is None


@pytest.mark.asyncio
async def test_no_topic_is_diagnostic_only(online_session, sink):
    await dispatch(online_session, NumericEvent(code=331, params=("me", "#c", "No topic is set")))
    assert sink.lines == []


@pytest.mark.asyncio
async def test_chanop_needed(online_session, sink):
    online_session.registry.add("#c")
    await dispatch(
        online_session,
        NumericEvent(code=482, params=("me", "#c", "You're not channel operator")),
    )
    assert sink.lines_for("#c") == ["#c You're not channel operator"]


@pytest.mark.asyncio
async def test_nick_in_use_retries_with_underscore(online_session, sink, transport):
    online_session.config.nick = "dave"
    await dispatch(online_session, NumericEvent(code=433, params=("*", "dave", "Nickname is already in use")))
    await dispatch(online_session, NumericEvent(code=433, params=("*", "dave_", "Nickname is already in use")))
    assert online_session.config.nick == "dave__"
    assert transport.sent == ["NICK dave_", "NICK dave__"]
    assert sink.lines_for("status") == [
        "Your nick dave is already in use",
        "Your nick dave_ is already in use",
    ]


@pytest.mark.asyncio
async def test_nick_retry_has_no_length_cap(online_session, transport):
    online_session.config.nick = "n"
    for _ in range(200):
        await dispatch(online_session, NumericEvent(code=433, params=("*",)))
    assert online_session.config.nick == "n" + "_" * 200
    assert len(transport.sent) == 200


@pytest.mark.asyncio
async def test_unhandled_numeric(online_session, sink):
    await dispatch(online_session, NumericEvent(code=999, params=("me", "odd")))
    assert sink.lines_for("status") == ["Unhandled event 999"]


@pytest.mark.asyncio
async def test_failing_handler_does_not_stop_decoding(online_session, sink, monkeypatch, caplog):
    online_session.registry.add("#c")

    def boom(name, text):
        raise RuntimeError("sink exploded")

    monkeypatch.setattr(online_session.registry, "append", boom)
    with caplog.at_level(logging.ERROR, logger="irctab"):
        await dispatch(online_session, ChannelMessageEvent(channel="#c", nick="bob", text="hi"))
    monkeypatch.undo()
    await dispatch(online_session, ChannelMessageEvent(channel="#c", nick="bob", text="again"))
    assert sink.lines_for("#c") == ["<bob> again"]
    assert any("sink exploded" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_unknown_event_type_is_logged(online_session, sink, caplog):
    with caplog.at_level(logging.WARNING, logger="irctab"):
        await dispatch(online_session, object())
    assert sink.lines == []
    assert any("No handler for object" in r.getMessage() for r in caplog.records)


def test_format_topic_time_rejects_garbage():
    assert format_topic_time("") == ""
    assert format_topic_time("abc") == ""
    assert format_topic_time("99999999999999999999") == ""
