# seeds/storage_keys.py
USER_STORAGE_KEY = "housewarming_user"
ADMIN_STORAGE_KEY = "housewarming_admin_session"
GIFTS_STORAGE_KEY = "housewarming_gifts"
RSVP_STORAGE_KEY = "housewarming_reservas_presenca"
CONFIG_STORAGE_KEY = "housewarming_config"
# Highest gift id ever issued, so removed ids are never handed out again
GIFT_SEQUENCE_STORAGE_KEY = "housewarming_gift_seq"

# Literal value stored under ADMIN_STORAGE_KEY while an admin session is open
ADMIN_SESSION_MARKER = "true"
