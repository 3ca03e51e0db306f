EVENTS_URL = "/events"
EVENT_DETAIL_URL = "/events/{event_id}"
EVENT_SEND_URL = "/events/{event_id}/send"
EVENT_RSVPS_URL = "/events/{event_id}/rsvps"
