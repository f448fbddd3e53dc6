"""Shared API constants."""

MESSAGE_MAX_LENGTH = 1000

MESSAGES_TABLE = "messages"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

JSON_HEADERS = {
    **CORS_HEADERS,
    "Content-Type": "application/json",
}
