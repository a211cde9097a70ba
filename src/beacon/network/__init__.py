"""Network record derivation from protocol event logs."""

from beacon.network.records import NETWORK_EVENTS, records_from_event_log

__all__ = ["NETWORK_EVENTS", "records_from_event_log"]
