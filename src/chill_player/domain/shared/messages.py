"""Centralized message constants for error messages, validation, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Input Validation Errors
    EMPTY_SEARCH_QUERY = "Please enter a search term."
    EMPTY_ITEM_ID = "A valid video ID or URL is required."
    EMPTY_PLAYLIST_ID = "A valid playlist ID or URL is required."
    INVALID_ITEM_ID = "'{value}' is not a valid video ID or URL."
    INVALID_PLAYLIST_ID = "'{value}' is not a valid playlist ID or URL."

    # Field Validation Errors (templates)
    FIELD_CANNOT_BE_EMPTY = "{field_name} cannot be empty"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    INVALID_TEMPLATE = "Announcement template must contain a '{title}' placeholder"

    # Catalog Errors
    SEARCH_FAILED = "Search failed: {error}"
    NO_SEARCH_RESULTS = "No results found for '{query}'."
    PLAYLIST_EMPTY = "Playlist is empty or contains no valid videos."
    PLAYLIST_LOAD_FAILED = "Failed to load playlist: {error}"
    RESOLVE_NOT_FOUND = "Video is private, unavailable, or not found."
    RESOLVE_RESTRICTED = "Video is age-restricted or requires consent and cannot be played."
    RESOLVE_UNRESOLVABLE = "No suitable audio-only format found for this video."

    # Speech Errors
    SPEECH_API_KEY_NOT_SET = "SPEECH__API_KEY is not set; announcements are disabled."
    SPEECH_EMPTY_AUDIO = "Speech service returned no audio"
    ANNOUNCEMENT_FAILED = "Announcement failed. Playing track directly."

    # Playback Errors
    PLAYBACK_RETRY_HINT = "{message} Try another track."
    ITEM_LOAD_FAILED = "Could not load '{title}'."
    NO_PLAYABLE_ITEMS = "No playable items in playlist '{title}'."
    NOT_CONNECTED_TO_VOICE = "Not connected to a voice channel."
    NO_SOURCE_LOADED = "No audio source loaded."

    # Startup Errors
    DISCORD_TOKEN_REQUIRED = "DISCORD__TOKEN environment variable is required"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Container not found on bot instance"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Orchestrator
    PHASE_CHANGED = "Guild session phase %s -> %s (title=%r, position=%s)"
    SELECTION_STARTED = "Selection #%d: %s %r"
    STALE_RESPONSE_DISCARDED = "Discarding stale %s response (token %d, current %d)"
    SIGNAL_IGNORED = "Ignoring %s signal for attempt %d (expected %d, phase %s)"
    TRACK_STAGED = "Staged %r for playback"
    STAGED_TRACK_MISSING = "Announcement finished but no staged track is present"
    ANNOUNCEMENT_BYPASSED = "Announcement bypassed for %r: %s"
    PRIMARY_STARTED = "Primary playback started: %r"
    PRIMARY_ENDED = "Primary playback ended: %r"
    ITEM_FAILED = "Item failed (%d/%d consecutive): %s"
    ITEM_LOAD_CRASHED = "Unexpected error while loading %r"
    RETRY_SCHEDULED = "Advancing playlist in %.2fs after failure"
    PLAYLIST_EXHAUSTED = "Playlist %r exhausted after %d consecutive failures"
    PLAYLIST_LOADED = "Loaded playlist %r with %d items"
    PLAYLIST_ADVANCED = "Playlist advanced to %s: %r"
    NEXT_IGNORED_NO_PLAYLIST = "Next requested without an active playlist"
    SESSION_FAILED = "Session failed: %s"
    SESSION_STOPPED = "Session stopped"
    PRESENTATION_CALLBACK_ERROR = "Presentation callback %s failed"

    # Session registry
    SESSION_CREATED = "Created player session for guild %s"
    SESSION_CLOSED = "Closed player session for guild %s"

    # Cache Operations
    CACHE_HIT = "Cache hit for '%s'"
    CACHE_EXPIRED_CLEANED = "Cleaned %d expired cache entries"

    # Catalog (yt-dlp)
    YTDLP_SEARCH = "Searching catalog for: %r"
    YTDLP_SEARCH_RESULTS = "Found %d results for %r"
    YTDLP_FAILED_SEARCH = "yt-dlp search failed for %r"
    YTDLP_RESOLVING = "Resolving stream for item %s"
    YTDLP_RESOLVED = "Resolved %s -> %r (%ss)"
    YTDLP_FAILED_RESOLVE = "yt-dlp failed to resolve %s: %s"
    YTDLP_MALFORMED_DATA = "yt-dlp returned malformed data for %s: %s"
    YTDLP_NO_STREAM_URL = "No stream URL for %r"
    YTDLP_LISTING_PLAYLIST = "Listing playlist %s"
    YTDLP_PLAYLIST_LISTED = "Playlist %s listed: %r, %d items"
    YTDLP_FAILED_PLAYLIST = "yt-dlp failed to list playlist %s: %s"

    # Speech
    SPEECH_CLIENT_INITIALIZED = "Speech client initialized (model=%s, voice=%s)"
    SPEECH_SYNTHESIZING = "Synthesizing announcement: %r"
    SPEECH_FAILED = "Speech synthesis failed: %r"
    SPEECH_CLIP_REMOVED = "Removed old speech clip %s"
    SPEECH_CLIP_REMOVE_FAILED = "Could not remove speech clip %s: %r"
    SPEECH_CLIP_WRITE_FAILED = "Could not write speech clip: %r"

    # Voice/Audio Operations
    VOICE_CONNECTED = "Connected to voice channel %s in %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_MOVED = "Moved to voice channel %s"
    VOICE_CONNECTION_TIMEOUT = "Timeout connecting to channel %s"
    VOICE_MOVE_TIMEOUT = "Timeout moving to channel %s"
    VOICE_NO_PERMISSION = "No permission to connect to channel %s"
    VOICE_CLIENT_ERROR = "Client error connecting: %r"
    VOICE_STALE_CLEANUP = "Found stale voice client in guild %s, cleaning up"
    VOICE_CLEANUP_ERROR = "Error during voice cleanup"
    VOICE_SELF_DEAFEN_FAILED = "Failed to self-deafen in guild %s: %s"
    GUILD_NOT_FOUND = "Guild %s not found"
    CHANNEL_NOT_VOICE = "Channel %s is not a voice channel"

    # Audio channels
    CHANNEL_LOADED = "[%s] guild %s loaded attempt %d: %s"
    CHANNEL_STARTED = "[%s] guild %s playing attempt %d"
    CHANNEL_RESUMED = "[%s] guild %s resumed attempt %d"
    CHANNEL_PAUSED = "[%s] guild %s paused attempt %d"
    CHANNEL_DETACHED = "[%s] guild %s detached attempt %d"
    CHANNEL_TERMINAL = "[%s] guild %s attempt %d finished: %s"
    CHANNEL_PLAYER_ERROR = "[%s] guild %s player error: %r"
    CHANNEL_CALLBACK_ERROR = "[%s] guild %s terminal callback failed"
    CHANNEL_NO_CALLBACK = "[%s] guild %s has no terminal callback"

    # Presentation
    PRESENTATION_NO_CHANNEL = "No text channel bound for guild %s; dropping update"
    PRESENTATION_SEND_FAILED = "Failed to update now-playing message in guild %s: %r"

    # Bot Lifecycle
    LOGGING_CONFIG_FALLBACK = "Could not load logging config %s (%s); using console defaults"
    BOT_STARTING = "Starting chill-player ({environment})"
    BOT_STARTING_RUN = "Starting bot..."
    BOT_STOPPED = "Bot stopped"
    BOT_KEYBOARD_INTERRUPT = "Received keyboard interrupt"
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_SETUP = "Setting up bot..."
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_READY = "Bot ready as %s (ID: %s)"
    BOT_CONNECTED_GUILDS = "Connected to %d guilds"
    BOT_COG_LOADED = "Loaded cog: %s"
    BOT_COG_LOAD_FAILED = "Failed to load cog %s: %s"
    BOT_SLASH_COMMAND_ERROR = "Slash command error in /%s: %r"
    BOT_ERROR_MESSAGE_SEND_FAILED = "Failed to send error message to user"
    BOT_SYNCED_GUILD = "Synced %d commands to guild %s"
    BOT_SYNC_GUILD_FAILED = "Failed to sync to guild %s: %s"
    BOT_SYNCED_GLOBAL = "Synced %d commands globally"
    BOT_SYNC_GLOBAL_FAILED = "Failed to sync globally: %s"
    BOT_SYNC_ON_STARTUP_FAILED = "Command sync on startup failed: %s"
    BOT_SHUTTING_DOWN = "Shutting down bot..."
    BOT_CONTAINER_SHUTDOWN = "Container shutdown complete"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error shutting down container: %s"
    BOT_SHUTDOWN_COMPLETE = "Bot shutdown complete"
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown timed out after %.1fs"
    BOT_CONTAINER_INITIALIZED = "Container initialized"
    BOT_CONTAINER_INIT_FAILED = "Container initialization failed: %s"
    BOT_COGS_LOADED_SUMMARY = "Cogs loaded: %d succeeded, %d failed"
    BOT_VOICE_DISCONNECT_FAILED = "Failed to disconnect voice client: %r"
    CONTAINER_SESSIONS_CLOSE_FAILED = "Failed closing player sessions: %r"
    CONTAINER_SYNTHESIZER_CLOSE_FAILED = "Failed closing speech synthesizer: %r"

    # Slash commands
    COMMAND_REJECTED = "/%s rejected in guild %s: %s"
    COMMAND_SEARCH_FAILED = "/search failed in guild %s: %s"


class DiscordUIMessages:
    """User-facing Discord messages and responses.

    These strings are shown directly to users in Discord interactions.
    Keep them concise, friendly, and include appropriate emoji.
    """

    # Command acknowledgements
    ACTION_LOADING_TRACK = "⏳ Loading `{item_id}`..."
    ACTION_LOADING_PLAYLIST = "⏳ Loading playlist `{playlist_id}`..."
    ACTION_SKIPPED = "⏭️ Skipping to the next track."
    ACTION_STOPPED = "⏹️ Stopped playback."
    ACTION_DISCONNECTED = "👋 Disconnected from voice."
    ACTION_SELECTED = "🎶 Selected **{title}**"

    # State messages
    STATE_SERVER_ONLY = "This command only works in a server."
    STATE_NEED_TO_BE_IN_VOICE = "You need to be in a voice channel."
    STATE_MUST_BE_IN_VOICE = "You must be in my voice channel to do that."
    STATE_VERIFY_VOICE_FAILED = "Could not verify your voice state."
    STATE_NOT_CONNECTED_TO_VOICE = "I'm not connected to voice."
    STATE_NO_PLAYLIST = "Next is only available while a playlist is playing."

    # Errors
    ERROR_COULD_NOT_JOIN_VOICE = "I couldn't join your voice channel."
    ERROR_OCCURRED = "❌ An error occurred: {error}"
    ERROR_SEARCH_FAILED = "❌ Search failed: {error}"
    ERROR_SELECTION_EXPIRED = "This search has expired. Run `/search` again."

    # Search results
    SEARCH_RESULTS_HEADER = "🔎 Results for **{query}**. Pick one to play:"
    SEARCH_PLACEHOLDER = "Choose a track..."

    # Now-playing embed
    EMBED_NOW_PLAYING = "🎵 Now Playing"
    EMBED_ANNOUNCING = "🗣️ Up Next"
    EMBED_LOADING = "⏳ Loading"
    EMBED_FINISHED = "✅ Finished"
    EMBED_FAILED = "❌ Playback Stopped"
    EMBED_IDLE = "⏹️ Idle"
    EMBED_PLAYLIST_FIELD = "📃 Playlist"
    EMBED_PLAYLIST_VALUE = "Track {position} of {total}"
    EMBED_NOTHING_PLAYING = "Nothing playing."

    # Error notices
    NOTICE_FATAL = "❌ {message}"
    NOTICE_TRANSIENT = "⚠️ {message}"
