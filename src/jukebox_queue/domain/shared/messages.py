"""Centralized message constants for error messages, validation, and log templates."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions, validation failures and caller-facing replies."""

    # Request Validation Errors
    REQUEST_BODY_REQUIRED = "Request body is required"
    INVALID_REQUEST_FIELD = "Invalid request field '{field}': {error}"

    # Track / Job Validation Errors
    TRACK_REQUIRED = "Track is required"
    PROJECT_REQUIRED = "Track '{title}' has no project"
    TRACK_URI_REQUIRED = "Track '{title}' has no URI"
    TRACK_DURATION_REQUIRED = "Track '{title}' has no duration"
    INVALID_TRACK = "Invalid track at position {index}: {error}"
    JOB_WITHOUT_STORE_KEY = "Job for '{title}' has no store record key"
    INVALID_JOB_ID = "Job ID must be positive"
    EMPTY_TOPIC = "Queue topic cannot be empty"

    # Queue Errors
    QUEUE_UNAVAILABLE = "Queue unavailable: {error}"
    QUEUE_CORRUPT_JOB = "Job {job_id} has an unreadable record"

    # Store Errors
    STORE_WRITE_FAILED = "Store write failed at '{path}': {error}"

    # Remote Catalog Errors
    MALFORMED_RESPONSE = "Malformed response from catalog: {error}"
    REMOTE_TRANSPORT_FAILED = "Catalog request failed: {error}"
    UNKNOWN_REMOTE_ERROR = "Unknown catalog error"
    ACCESS_TOKEN_UNDEFINED = "access_token undefined"
    NO_DEVICES = "no devices"

    # Credential Refresh Errors
    REFRESH_TOKEN_MISSING = "No refresh token supplied"
    CATALOG_CREDENTIALS_MISSING = "Catalog client credentials are not configured"

    # Time/Date Validation Errors
    TIMEZONE_REQUIRED_UTC_DATETIME = "UtcDateTime requires a timezone-aware datetime"

    # Settings Validation Errors
    INVALID_QUEUE_URL = "Queue URL must start with redis:// or rediss://"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Queue Connection Lifecycle
    QUEUE_CONNECTED = "Queue connection pool opened (host=%s, port=%s, auth=%s)"
    QUEUE_CLOSED = "Queue connection pool closed"

    # Queue Operations
    QUEUE_ENQUEUED = "Enqueued job %s for '%s' on topic '%s' (priority %s)"
    QUEUE_ENQUEUE_FAILED = "Failed to enqueue '%s' on topic '%s': %s"
    QUEUE_CLAIMED = "Claimed job %s from topic '%s'"
    QUEUE_COMPLETED = "Completed job %s"
    QUEUE_REQUEUED = "Requeued %d active jobs on topic '%s'"

    # Submission
    SUBMISSION_ADDING = "Adding '%s' (%s) to '%s'"
    SUBMISSION_REJECTED = "Rejected submission: %s"
    SUBMISSION_TRACK_INVALID = "Skipping track %d: %s"
    SUBMISSION_ACCEPTED = "Submission accepted: %d of %d tracks issued"
    SUBMISSION_PLAYLIST_FETCHED = "Fetched %d tracks from playlist %s of %s"
    JOB_QUEUED = "Job %s for '%s' queued on '%s' at priority %s (record %s)"

    # Store Operations
    STORE_RECORD_CREATED = "Created store record %s"
    STORE_WRITE_FAILED = "Store write failed at %s: %s"
    STORE_LINKED = "Linked job %s at %s"
    STORE_LINK_FAILED = "Job %s on topic '%s' is queued but not linked: %s"

    # Catalog
    CATALOG_SEARCHING = "Searching for %s"
    CATALOG_REMOTE_ERROR = "Catalog call '%s' failed: %s"
    CATALOG_SKIPPED_ITEM = "Skipping playlist item without a track"

    # Credential Refresh
    REFRESH_SCHEDULED = "Scheduling credential refresh for %s (device_call=%s)"
    REFRESH_SUCCEEDED = "Refreshed access token for %s (device_call=%s)"
    REFRESH_FAILED = "Failed to refresh access token for %s (device_call=%s): %s"

    # Background Tasks
    BACKGROUND_TASK_FAILED = "Background task %s failed"
    BACKGROUND_DRAIN_TIMEOUT = "Timed out draining %d background tasks"

    # Application Lifecycle
    APP_STARTING = "Starting jukebox queue in {environment} mode"
    CONTAINER_INITIALIZED = "Container initialized (queue mode=%s)"
    CONTAINER_SHUTDOWN = "Container shutdown complete"
    FATAL_ERROR = "Fatal error: %s"
