"""Exceptions raised before or outside a generation/simulation result.

Each carries the HTTP status and the message shown to the client. Upstream
error text never goes into ``message``.
"""


class DotminiError(Exception):
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidInput(DotminiError):
    """Caller sent a missing or malformed field."""

    status_code = 400
    message = "Invalid request."


class UnsupportedLanguage(InvalidInput):
    def __init__(self, language: object, supported: str = "python"):
        # Absent field reads as the front-end's 'undefined'
        shown = "undefined" if language is None else language
        super().__init__(
            f"Language '{shown}' not supported for execution "
            f"(Simulation only supports {supported.capitalize()})."
        )


class SimulationTooLong(InvalidInput):
    message = "Simulated Execution Error: Code too long."


class InternalError(DotminiError):
    status_code = 500
    message = "Internal server error during simulation."
