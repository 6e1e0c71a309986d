"""survey_server — FastAPI REST API for the survey validation SDK.

Exposes the loaded survey definitions, their response schemas, and
response validation as a stateless HTTP API.
"""
