import os


def _optional_int(name):
    value = os.environ.get(name)
    return int(value) if value not in (None, '') else None


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Shared secret for operator endpoints and client secret derivation
    GAME_SECRET = os.environ.get('SECRET') or 'foobar'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')

    MAX_PLAYERS = int(os.environ.get('MAX_PLAYERS', '10'))
    # Hold time after a win before the game resets itself (seconds)
    AUTO_RESET_DELAY_SEC = float(os.environ.get('AUTO_RESET_DELAY_SEC', '20'))
    # Background loops
    TICK_INTERVAL_MS = int(os.environ.get('TICK_INTERVAL_MS', '50'))
    ROSTER_INTERVAL_SEC = float(os.environ.get('ROSTER_INTERVAL_SEC', '10'))
    # Artificial latency and jitter on the target query
    TARGET_QUERY_DELAY_MS = int(os.environ.get('TARGET_QUERY_DELAY_MS', '100'))
    TARGET_NOISE = float(os.environ.get('TARGET_NOISE', '10'))

    # Motion (units per tick)
    MIN_SPEED = int(os.environ.get('MIN_SPEED', '20'))
    MAX_SPEED = int(os.environ.get('MAX_SPEED', '60'))
    DIRECTION_CHANGE_PROBABILITY = float(os.environ.get('DIRECTION_CHANGE_PROBABILITY', '0.05'))
    TARGET_AREA = float(os.environ.get('TARGET_AREA', '20'))
    RANDOM_SEED = _optional_int('RANDOM_SEED')

    # Shots are accepted anywhere on the playfield
    PLAYFIELD_WIDTH = float(os.environ.get('PLAYFIELD_WIDTH', '1024'))
    PLAYFIELD_HEIGHT = float(os.environ.get('PLAYFIELD_HEIGHT', '600'))
    # The target itself is kept inside this rectangle
    TARGET_MIN_X = float(os.environ.get('TARGET_MIN_X', '20'))
    TARGET_MAX_X = float(os.environ.get('TARGET_MAX_X', '1000'))
    TARGET_MIN_Y = float(os.environ.get('TARGET_MIN_Y', '20'))
    TARGET_MAX_Y = float(os.environ.get('TARGET_MAX_Y', '580'))

    # endpoint -> (window ms, max requests)
    RATE_LIMITS = {
        'join': (60000, 10),
        'fire': (2000, 1),
        'target': (1000, 1),
    }
