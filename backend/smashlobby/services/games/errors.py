class JoinRejected(Exception):
    """A join request that must be refused; carries the reason shown to the client."""

    reason = 'join rejected'
    status_code = 403

    def __init__(self, reason=None):
        if reason is not None:
            self.reason = reason
        super().__init__(self.reason)


class LobbyNotFound(JoinRejected):
    reason = 'lobby not found'
    status_code = 404


class LobbyStarted(JoinRejected):
    reason = 'lobby already started'


class LobbyFull(JoinRejected):
    reason = 'lobby is full'


class NameTaken(JoinRejected):
    reason = 'username already taken'
