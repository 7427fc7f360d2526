import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    PORT = int(os.environ.get('PORT', '6464'))
    # Comma separated list; '*' allows any origin
    _origins = os.environ.get('ALLOWED_ORIGINS', '*')
    ALLOWED_ORIGINS = '*' if _origins == '*' else [o.strip() for o in _origins.split(',')]
    # Lobbies nobody joins are dropped after this many seconds
    LOBBY_EXPIRY_SEC = float(os.environ.get('LOBBY_EXPIRY_SEC', '10'))
    LOBBY_CODE_LENGTH = int(os.environ.get('LOBBY_CODE_LENGTH', '6'))
    # Reaction window after each played card (seconds)
    SMASH_WINDOW_SEC = float(os.environ.get('SMASH_WINDOW_SEC', '2'))
    # Seat limits; the deal table covers 2-8 players
    MIN_PLAYERS = int(os.environ.get('MIN_PLAYERS', '2'))
    MAX_PLAYERS = int(os.environ.get('MAX_PLAYERS', '8'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
