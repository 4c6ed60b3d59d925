# Infrastructure Layer
# ====================
# Contains all external service integrations:
# - config/: Environment and settings management
# - persistence/: MongoDB repository and migrations
# - llm/: Google Gemini likes/dislikes summarisation
