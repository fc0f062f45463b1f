import logging

import keel
from keel._codes import codes

logger = logging.getLogger(__name__)


def test_codes_values():
    assert keel.codes.OK == 200
    assert keel.codes.NOT_FOUND == 404
    assert keel.codes.CONFLICT == 409
    assert keel.codes.UNPROCESSABLE_ENTITY == 422
    logger.info(f"keel.codes.OK.phrase: {keel.codes.OK.phrase}")


def test_codes_phrases():
    assert keel.codes.OK.phrase == "OK"
    assert keel.codes.NOT_FOUND.phrase == "Not Found"
    assert keel.codes.CONFLICT.phrase == "Conflict"
    assert keel.codes.GONE.phrase == "Gone"


def test_codes_string_representation():
    assert str(keel.codes.OK) == "200"
    assert str(keel.codes.NOT_FOUND) == "404"


def test_get_reason_phrase():
    assert codes.get_reason_phrase(201) == "Created"
    assert codes.get_reason_phrase(422) == "Unprocessable Entity"

    # not listed
    assert codes.get_reason_phrase(299) == ""
    assert codes.get_reason_phrase(999) == ""


def test_ranges():
    assert codes.is_success(200) is True
    assert codes.is_success(299) is True
    assert codes.is_success(199) is False
    assert codes.is_success(300) is False

    assert codes.is_client_error(400) is True
    assert codes.is_client_error(499) is True
    assert codes.is_client_error(500) is False

    assert codes.is_server_error(500) is True
    assert codes.is_server_error(599) is True
    assert codes.is_server_error(499) is False

    assert codes.is_error(404) is True
    assert codes.is_error(503) is True
    assert codes.is_error(204) is False
    assert codes.is_error(600) is False


def test_lowercase_compatibility():
    assert hasattr(codes, "not_found")
    assert codes.not_found == 404
    assert codes.conflict == 409


def test_enum_behavior():
    assert keel.codes.OK == codes.OK
    assert isinstance(keel.codes.OK, codes)
    assert isinstance(keel.codes.OK, int)
    assert codes(410) is codes.GONE
