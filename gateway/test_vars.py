from gateway.vars import (
    DEFAULT_ALLOWED_ORIGINS,
    PORT,
    _parse_origins,
    _parse_timeout,
)


def test_default_port_is_int():
    assert isinstance(PORT, int)


def test_parse_origins_defaults_when_empty():
    assert _parse_origins("") == DEFAULT_ALLOWED_ORIGINS
    assert _parse_origins(" , ") == DEFAULT_ALLOWED_ORIGINS


def test_parse_origins_is_immutable_tuple():
    origins = _parse_origins("https://a.example, http://b.example ")

    assert origins == ("https://a.example", "http://b.example")
    assert isinstance(origins, tuple)


def test_parse_timeout():
    assert _parse_timeout("") is None
    assert _parse_timeout("2.5") == 2.5
