# ReviewHub - Affiliate Product Reviews with Reddit Sentiment
# ===========================================================
# JSON API for product review posts, likes, comments and AI summaries.
#
# ARCHITECTURE LAYERS:
# - Presentation:   FastAPI routes, session auth (web/)
# - Domain:         Errors, identity, like accounting, product rules (domain/)
# - Infrastructure: MongoDB, Gemini, settings (infrastructure/)
#
# Domain code imports nothing from the other two layers.
