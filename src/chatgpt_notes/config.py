"""Centralized configuration constants for ChatGPT Notes."""

# Persisted pair state
STATE_FILE_NAME = ".chatgpt-plugin-metadata.json"
PREVIEW_LENGTH = 100
HASH_SAMPLE_LENGTH = 200

# Name allocation
FORBIDDEN_FILENAME_CHARS = '\\/:*?"<>|'
NOTE_EXTENSION = ".md"
MAX_COLLISION_RETRIES = 1000
MAX_CREATE_ATTEMPTS = 5

# Note rendering
SOURCE_LABEL = "ChatGPT"
DEFAULT_TITLE_SUFFIX = " - Response"
DEFAULT_FOLDER = "ChatGPT"
DEFAULT_TAGS = "chatgpt, ai"
DEFAULT_INCLUDE_USER_PROMPTS = True
DEFAULT_INCLUDE_TIMESTAMPS = True
DEFAULT_INCLUDE_TAGS = True

# Environment overrides
VAULT_ENV = "CHATGPT_NOTES_VAULT"
EXPORT_ENV = "CHATGPT_NOTES_EXPORT"
FOLDER_ENV = "CHATGPT_NOTES_FOLDER"
TAGS_ENV = "CHATGPT_NOTES_TAGS"
INCLUDE_PROMPTS_ENV = "CHATGPT_NOTES_INCLUDE_PROMPTS"
INCLUDE_TIMESTAMPS_ENV = "CHATGPT_NOTES_INCLUDE_TIMESTAMPS"
INCLUDE_TAGS_ENV = "CHATGPT_NOTES_INCLUDE_TAGS"
