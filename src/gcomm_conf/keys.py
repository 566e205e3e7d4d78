"""Canonical option keys and transport schemes.

Descriptors have the form
``gcomm://[<peer_host>[:<peer_port>]][?<key1>=<val1>&<key2>=<val2>]...``;
the scheme selects the transport and the query options configure each layer.
"""

from typing import Final

# Transport schemes
TCP_SCHEME: Final = "tcp"
UDP_SCHEME: Final = "udp"
GMCAST_SCHEME: Final = "gmcast"
EVS_SCHEME: Final = "evs"
PC_SCHEME: Final = "pc"

SCHEMES: Final = (TCP_SCHEME, UDP_SCHEME, GMCAST_SCHEME, EVS_SCHEME, PC_SCHEME)

# Socket options
TCP_NON_BLOCKING: Final = "socket.non_blocking"

# Group multicast (gmcast) discovery
GMCAST_GROUP: Final = "gmcast.group"
GMCAST_LISTEN_ADDR: Final = "gmcast.listen_addr"
GMCAST_MCAST_ADDR: Final = "gmcast.mcast_addr"
GMCAST_MCAST_PORT: Final = "gmcast.mcast_port"
GMCAST_MCAST_TTL: Final = "gmcast.mcast_ttl"

# Extended virtual synchrony (evs) membership protocol
EVS_VIEW_FORGET_TIMEOUT: Final = "evs.view_forget_timeout"
EVS_SUSPECT_TIMEOUT: Final = "evs.suspect_timeout"
EVS_INACTIVE_TIMEOUT: Final = "evs.inactive_timeout"
EVS_INACTIVE_CHECK_PERIOD: Final = "evs.inactive_check_period"
EVS_CONSENSUS_TIMEOUT: Final = "evs.consensus_timeout"
EVS_INSTALL_TIMEOUT: Final = "evs.install_timeout"
EVS_KEEPALIVE_PERIOD: Final = "evs.keepalive_period"
EVS_JOIN_RETRANS_PERIOD: Final = "evs.join_retrans_period"
EVS_STATS_REPORT_PERIOD: Final = "evs.stats_report_period"
EVS_DEBUG_LOG_MASK: Final = "evs.debug_log_mask"
EVS_INFO_LOG_MASK: Final = "evs.info_log_mask"
EVS_SEND_WINDOW: Final = "evs.send_window"
EVS_USER_SEND_WINDOW: Final = "evs.user_send_window"
EVS_USE_AGGREGATE: Final = "evs.use_aggregate"
