import pytest

from factual_driver.core.submissions import FlagRequest, SubmitRequest


def test_flag_request_validity():
    assert not FlagRequest().is_valid()
    assert not FlagRequest(table_name="places", factual_id="abc").is_valid()
    assert FlagRequest(user_token="me", table_name="places", factual_id="abc").is_valid()


def test_flag_request_unknown_problem():
    with pytest.raises(ValueError):
        FlagRequest(problem="boring")


def test_flag_request_params_are_encoded():
    flag = FlagRequest(
        user_token="user 1",
        table_name="places",
        factual_id="abc",
        problem="duplicate",
        comment="same as #2",
    )
    assert flag.to_url_params() == {
        "problem": "duplicate",
        "user": "user%201",
        "comment": "same%20as%20%232",
    }


def test_submit_request_validity():
    assert not SubmitRequest(user_token="me").is_valid()
    # a factual_id is only needed for updates
    assert SubmitRequest(user_token="me", table_name="places").is_valid()


def test_submit_request_params():
    submit = SubmitRequest(user_token="me", table_name="places").set_value("name", "Bar & Grill")
    assert submit.to_url_params() == {
        "values": "%7B%22name%22%3A%22Bar%20%26%20Grill%22%7D",
        "user": "me",
    }
