"""Centralized message constants for error messages, validation, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Discord ID Validation Errors
    INVALID_USER_ID = "User ID must be positive"
    INVALID_SNOWFLAKE = "Discord snowflake ID must be positive"
    SNOWFLAKE_TOO_LARGE = "Discord snowflake ID exceeds maximum value (2^64)"

    # Field Validation Errors (templates)
    FIELD_CANNOT_BE_EMPTY = "{field_name} cannot be empty"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"

    # Search Backend Errors
    UNKNOWN_LOAD_TYPE = "Unknown backend loadType: {tag!r}"
    MALFORMED_BACKEND_RESPONSE = "Backend response is missing an array-typed track list"
    NO_LAVALINK_NODES = "No Lavalink node is available"

    # Catalog Provider Errors
    SPOTIFY_CREDENTIALS_MISSING = "Spotify client_id/client_secret are not configured"
    SPOTIFY_AUTH_FAILED = "Spotify token request failed with HTTP {status}"
    SPOTIFY_REQUEST_FAILED = "Spotify request {path} failed with HTTP {status}"
    SPOTIFY_BAD_PAYLOAD = "Spotify returned an unexpected payload"

    # Authentication/Security Errors
    DISCORD_TOKEN_REQUIRED = "DISCORD_TOKEN environment variable is required"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Container not found on bot instance"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # /play pipeline
    PLAY_PRECONDITION_FAILED = "Play rejected in guild %s: missing %s"
    PLAY_CLASSIFIED = "Play query classified as %s in guild %s (user %s)"
    PLAY_UNEXPECTED_ERROR = "Unexpected error handling play in guild %s for %r"
    PLAY_BATCH_EMPTY = "No tracks resolved for playlist %s (%d search strings)"
    PLAY_BATCH_QUEUED = "Queued %d/%d tracks from playlist %s in guild %s"
    PLAY_ITEM_MALFORMED = "Skipping %r: malformed backend response (%s)"
    PLAY_ITEM_SKIPPED = "Skipping %r: no match"
    PLAY_ITEM_FAILED = "Skipping %r: backend error (%s)"
    PLAY_PLAYBACK_TRIGGERED = "Playback triggered in guild %s"

    # Playlist expansion
    EXPANSION_COMPLETED = "Expanded playlist %s: %d search strings (reported total %d, %d pages)"
    EXPANSION_ABORTED = "Expansion of playlist %s stopped after %d search strings: %s"
    EXPANSION_SINGLE_FAILED = "Failed to fetch external track %s: %s"
    EXPANSION_SINGLE_UNUSABLE = "External track %s has no usable title/artists"

    # Track resolution
    RESOLVE_EMPTY = "Resolution returned %s for %r"
    RESOLVE_COMPLETED = "Resolved %d track(s) (%s) for %r"
    RESOLVE_ENTRY_SKIPPED = "Skipping backend entry %d: %s"
    RESOLVE_ENTRY_NO_URI = "Skipping backend entry %d: no uri or identifier"
    RESOLVE_MALFORMED = "Malformed backend response for %r: %s"

    # Requester registry
    REGISTRY_EVICTED = "Requester registry full, evicted %s"

    # Lavalink
    LAVALINK_NODE_READY = "Lavalink node %s ready (version %s)"
    LAVALINK_NODE_FAILED = "Lavalink node %s unavailable: %r"
    LAVALINK_NODE_RECOVERED = "Lavalink node %s recovered"
    LAVALINK_NO_NODES_AVAILABLE = "No Lavalink nodes reachable at startup; /play will be refused"
    LAVALINK_SEARCH = "Lavalink node %s loading %r"

    # Spotify
    SPOTIFY_NOT_CONFIGURED = "Spotify credentials not configured; Spotify links will find nothing"
    SPOTIFY_TOKEN_REFRESHED = "Spotify access token refreshed (expires in %ss)"
    SPOTIFY_TOKEN_REJECTED = "Spotify rejected the cached token, refreshing"
    SPOTIFY_PAGE_FETCHED = "Fetched Spotify playlist %s page at offset %d (%d items)"

    # Playback connections
    CONNECTION_CREATED = "Created playback connection for guild %s (voice channel %s)"
    CONNECTION_REMOVED = "Dropped playback connection for guild %s (%s)"
    SESSION_NOT_FOUND = "No session found for guild %s"
    QUEUE_EMPTY = "Queue empty in guild %s"
    QUEUE_ENQUEUED = "Enqueued track '%s' at position %s in guild %s"
    PLAYBACK_STARTED = "Started playing '%s' in guild %s"
    PLAYBACK_STOPPED = "Stopped playback in guild %s"
    PLAYBACK_CALLBACK_ERROR = "Error in track start callback for guild %s: %s"
    TRACK_FINISHED = "Track finished: %s in guild %s"
    NOW_PLAYING_SEND_FAILED = "Failed to announce now playing in guild %s: %s"

    # Container lifecycle
    CONTAINER_CLOSE_FAILED = "Failed closing %s: %r"

    # Startup / shutdown
    LOGGING_FALLBACK = "Using basic logging config: %s"
    BOT_STARTING = "Starting discord-play-queue (%s)"
    BOT_BACKEND_SUMMARY = "Lavalink nodes: %d (default search %s), Spotify: %s"
    BOT_SETUP = "Running setup hook"
    BOT_CONTAINER_INIT_FAILED = "Container initialization failed: %s"
    BOT_SETUP_COMPLETE = "Setup hook finished"
    BOT_READY = "Logged in as %s, serving %d guild(s)"
    BOT_KEYBOARD_INTERRUPT = "Interrupted, shutting down"
    BOT_FATAL_ERROR = "Bot crashed"
    BOT_STOPPED = "Bot stopped"
    BOT_SHUTTING_DOWN = "Closing bot"
    BOT_SHUTDOWN_TIMEOUT = "Shutdown did not finish within %ss"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Container shutdown failed: %s"
    BOT_SHUTDOWN_COMPLETE = "Bot closed"

    # Extensions and slash command sync
    BOT_COG_LOAD_FAILED = "Could not load extension %s"
    BOT_COGS_LOADED = "Loaded %d/%d extension(s)"
    BOT_SYNCED = "Synced %d command(s) (%s)"
    BOT_SYNC_FAILED = "Command sync failed (%s): %s"
    BOT_SYNC_ON_STARTUP_FAILED = "Command sync on startup failed: %s"

    # Interaction errors
    BOT_SLASH_COMMAND_ERROR = "Unhandled error in /%s: %s"
    EPHEMERAL_REPLY_FAILED = "Could not send ephemeral reply: %s"


class DiscordUIMessages:
    """User-facing Discord messages and responses.

    These strings are shown directly to users in Discord interactions.
    Keep them concise, friendly, and include appropriate emoji.
    """

    # Queue confirmations
    QUEUED_SPOTIFY_PLAYLIST = "✅ Queued {count} tracks from Spotify"
    QUEUED_BACKEND_PLAYLIST = "✅ Added {count} tracks from playlist"
    NOW_PLAYING_TRACK = "▶️ Now playing: **{title}**"
    QUEUED_TRACK = "✅ Added to queue: **{title}** (position {position})"

    # Error Messages
    ERROR_NOT_IN_VOICE = "❌ You must be in a voice channel to use this command!"
    ERROR_NO_BACKEND_NODES = "❌ The music server is unavailable right now. Please try again later."
    ERROR_NO_RESULTS = "🔍 No results found for your query."
    ERROR_NO_TRACKS_FOUND = "🔍 No tracks found in that playlist."
    ERROR_RESOLUTION_FAILED = "❌ Failed to process your request. Please try a different query."
    ERROR_PLAY_UNEXPECTED = "❌ An unexpected error occurred. Please try again."
    ERROR_INVALID_QUERY = "❌ Please provide something to search for."

    # State Messages
    STATE_NOTHING_PLAYING = "Nothing is playing."
    STATE_SERVER_ONLY = "This command can only be used in a server."
    STATE_VERIFY_VOICE_FAILED = "Could not verify your voice state."

    # Embeds
    EMBED_NOW_PLAYING = "🎵 Now Playing"
    EMBED_ADDED_TO_QUEUE = "📋 Added to Queue"
    EMBED_REQUESTED_BY = "Requested by: {name}"
    UNKNOWN_REQUESTER = "Unknown"
