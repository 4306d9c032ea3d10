PARTY_URL = "/api/party"
RSVP_STATUS_URL = "/api/rsvp-status"
RSVP_URL = "/api/rsvp"
GENERAL_RSVP_URL = "/api/rsvp/general"
ADMIN_LIST_URL = "/api/admin-list"
