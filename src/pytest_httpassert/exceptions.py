class HttpAssertError(Exception):
    pass


class TransportError(HttpAssertError):
    pass


class BodyReadError(HttpAssertError):
    pass


class DocumentParseError(HttpAssertError):
    pass


class SelectorError(HttpAssertError):
    pass
