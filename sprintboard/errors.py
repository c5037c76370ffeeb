"""Error taxonomy.

Services raise these; the app factory maps them to JSON responses
carrying the status code below.
"""


class SprintboardError(Exception):
    status_code = 500
    default_message = "Something went wrong."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequest(SprintboardError):
    status_code = 400
    default_message = "Missing or empty required field."


class NoColumns(SprintboardError):
    status_code = 400
    default_message = "Project has no columns."


class Unauthenticated(SprintboardError):
    status_code = 401
    default_message = "Authentication required."


class InvalidCredentials(SprintboardError):
    # Same message for unknown email and wrong password.
    status_code = 401
    default_message = "Invalid email or password."


class Forbidden(SprintboardError):
    status_code = 403
    default_message = "You do not have permission to do that."


class NotFound(SprintboardError):
    status_code = 404
    default_message = "Not found."


class DuplicateKey(SprintboardError):
    status_code = 409
    default_message = "That value is already taken."
