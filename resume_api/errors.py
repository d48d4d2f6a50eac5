class RelayError(Exception):
    """Base for every failure that ends up as a JSON ``{error, kind}`` body."""

    status_code = 500
    kind = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict:
        return {"error": self.message, "kind": self.kind}


class ValidationError(RelayError):
    status_code = 400
    kind = "validation_error"


class UpstreamFailure(RelayError):
    status_code = 502
    kind = "upstream_failure"


class EmptyResponse(RelayError):
    status_code = 502
    kind = "empty_response"


class MalformedSchema(RelayError):
    status_code = 500
    kind = "malformed_schema"


class RenderFailure(RelayError):
    status_code = 500
    kind = "render_failure"


class ConfigError(RuntimeError):
    pass
