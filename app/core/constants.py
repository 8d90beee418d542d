"""Application constants."""

# Listing pagination
DEFAULT_LISTING_LIMIT = 20
MAX_LISTING_LIMIT = 50

# Images per listing
MAX_IMAGES_PER_LISTING = 10

# Signup
MIN_PHONE_DIGITS = 10
MIN_PASSWORD_LENGTH = 8
# bcrypt only reads this many bytes of a password
MAX_PASSWORD_BYTES = 72
