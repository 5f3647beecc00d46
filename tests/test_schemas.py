import pytest
from pydantic import ValidationError

from jsend.schemas import Envelope


class TestEnvelope:
    """Tests for the decoded envelope schema"""

    def test_valid_envelope(self):
        envelope = Envelope.model_validate({"status": "success", "data": {"id": 1}})
        assert envelope.status == "success"
        assert envelope.data == {"id": 1}
        assert envelope.has_data_key()

    def test_explicit_null_data_counts_as_present(self):
        assert Envelope.model_validate({"status": "fail", "data": None}).has_data_key()

    def test_missing_data_key(self):
        envelope = Envelope.model_validate({"status": "error", "message": "boom"})
        assert envelope.data is None
        assert not envelope.has_data_key()

    def test_code_accepts_int_and_str(self):
        assert Envelope.model_validate({"status": "error", "message": "m", "code": 5}).code == 5
        assert Envelope.model_validate({"status": "error", "message": "m", "code": "5"}).code == "5"

    @pytest.mark.parametrize(
        "payload",
        [
            {"status": 1},
            {"status": "success", "data": [1]},
            {"status": "error", "message": 3},
            {"status": "error", "message": "m", "code": None, "data": 7},
        ],
    )
    def test_invalid_types(self, payload):
        with pytest.raises(ValidationError):
            Envelope.model_validate(payload)
