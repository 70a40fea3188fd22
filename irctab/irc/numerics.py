"""
Numeric replies the client reacts to (RFC 1459 / 2812 plus common extensions).

Anything not listed here reaches the status window as an unhandled event.
"""

# Registration / server information
RPL_WELCOME = 1
RPL_YOURHOST = 2
RPL_CREATED = 3
RPL_MYINFO = 4
RPL_BOUNCE = 5  # RPL_ISUPPORT on modern servers
RPL_STATSCONN = 250  # highest connection count
RPL_LUSERCLIENT = 251
RPL_LUSEROP = 252
RPL_LUSERUNKNOWN = 253
RPL_LUSERCHANNELS = 254
RPL_LUSERME = 255
RPL_LOCALUSERS = 265
RPL_GLOBALUSERS = 266
RPL_MOTD = 372
RPL_MOTDSTART = 375
RPL_ENDOFMOTD = 376
RPL_HOSTHIDDEN = 396  # displayed host

# Channel state
RPL_NOTOPIC = 331
RPL_TOPIC = 332
RPL_TOPICWHOTIME = 333
RPL_NAMREPLY = 353
RPL_ENDOFNAMES = 366

# Errors
ERR_NICKNAMEINUSE = 433
ERR_CHANOPRIVSNEEDED = 482

# Replies shown as "<param1>" or "<param1> <param2>" in the status window
SERVER_INFO_REPLIES = frozenset(
    {
        RPL_WELCOME,
        RPL_YOURHOST,
        RPL_CREATED,
        RPL_STATSCONN,
        RPL_LUSERCLIENT,
        RPL_LUSEROP,
        RPL_LUSERUNKNOWN,
        RPL_LUSERCHANNELS,
        RPL_LUSERME,
        RPL_LOCALUSERS,
        RPL_GLOBALUSERS,
        RPL_MOTD,
        RPL_MOTDSTART,
        RPL_ENDOFMOTD,
        RPL_HOSTHIDDEN,
    }
)

# Replies shown as all parameters after the target nick
PARAM_LIST_REPLIES = frozenset({RPL_MYINFO, RPL_BOUNCE})
