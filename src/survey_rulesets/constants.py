"""Survey engine constants shared across the SDK.

These values are referenced by the prompt models, the validator and the
definition store.

A few settings can be overridden via environment variables so that
deployments can change engine behaviour without code changes.
"""

import os

# Whether the media hooks enforce ``max_dimension`` / ``max_duration_ms``.
# Off by default: media answers are only checked for existence.
# Overridable via the ENFORCE_MEDIA_LIMITS env var ("1", "true", "yes").
ENFORCE_MEDIA_LIMITS = os.getenv("ENFORCE_MEDIA_LIMITS", "false").strip().lower() in (
    "1",
    "true",
    "yes",
)

# Choice prompts reject undeclared values unless told otherwise.
DEFAULT_ALLOW_CUSTOM = False

# Display types accepted by each prompt type.  The first entry is the
# default used when a definition omits ``display_type``.
DISPLAY_TYPES_BY_PROMPT: dict[str, tuple[str, ...]] = {
    "text": ("textbox",),
    "number": ("textbox", "picker", "slider"),
    "timestamp": ("calendar", "picker"),
    "number_single_choice": ("list", "picker", "slider"),
    "number_multi_choice": ("list", "picker", "slider"),
    "string_single_choice": ("list", "picker"),
    "string_multi_choice": ("list", "picker"),
    "audio": ("recorder",),
    "image": ("camera",),
    "video": ("camera", "recorder"),
    "remote_activity": ("launcher",),
}

# File extensions picked up by the definition store.
SURVEY_FILE_SUFFIXES: tuple[str, ...] = (".yaml", ".yml")
