"""Target kinds that likes and subscriptions can point at."""

NOTICE = "notice"
INFLUENCER = "influencer"
STORE = "store"
MEMBERSHIP = "membership"

LIKE_TARGETS = (NOTICE, INFLUENCER, STORE, MEMBERSHIP)
SUBSCRIPTION_TARGETS = (INFLUENCER, STORE)

ROLE_ADMIN = "admin"
ROLE_USER = "user"
ROLE_STORE = "store"
ROLE_INFLUENCER = "influencer"
