# Presentation Layer
# ==================
# FastAPI application, session auth and JSON route handlers.
