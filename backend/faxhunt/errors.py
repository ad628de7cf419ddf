class GameError(Exception):
    """Base error for requests the game refuses. Rendered as ``{"error": message}``."""

    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'error': self.message}


class ValidationError(GameError):
    status_code = 400


class AuthorizationError(GameError):
    status_code = 401


class CapacityError(GameError):
    status_code = 403
    default_message = 'Max number of users reached. Please try again later.'


class ConflictError(GameError):
    status_code = 409
