import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Room capacity; a room auto-starts once it holds this many ready agents
    REQUIRED_PLAYERS = int(os.environ.get('REQUIRED_PLAYERS', '2'))
    # How long the final leaderboard stays up before the room resets (ms)
    LEADERBOARD_DURATION_MS = int(os.environ.get('LEADERBOARD_DURATION_MS', '10000'))
    # Synchronized countdown between auto-start and gameplay (ms)
    START_COUNTDOWN_MS = 3000
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3001'))
    CORS_ALLOWED_ORIGINS = os.environ.get('CORS_ALLOWED_ORIGINS', '*')
    # Socket.IO heartbeat (seconds)
    SOCKETIO_PING_TIMEOUT = int(os.environ.get('SOCKETIO_PING_TIMEOUT', '60'))
    SOCKETIO_PING_INTERVAL = int(os.environ.get('SOCKETIO_PING_INTERVAL', '25'))
