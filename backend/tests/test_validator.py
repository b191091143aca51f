"""
FormDrop Backend: Validator Unit Tests
========================================

What:  validate_submission accepts exactly the complete forms.
How:   Plain function calls; no I/O.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from app.exceptions import ValidationError
from app.services.validator import validate_submission

IMAGES = ["http://test/uploads/images-1-a.png", "http://test/uploads/images-1-b.png"]


class TestValidateSubmission:

    def test_complete_form_builds_record(self):
        record = validate_submission("Ann", "30", "hi", "a@x.com", IMAGES)

        assert record.name == "Ann"
        assert record.age == "30"
        assert record.message == "hi"
        assert record.email == "a@x.com"
        assert record.images == IMAGES

    def test_images_keep_receipt_order(self):
        reversed_images = list(reversed(IMAGES))
        record = validate_submission("Ann", "30", "hi", "a@x.com", reversed_images)
        assert record.images == reversed_images

    @pytest.mark.parametrize("field", ["name", "age", "message", "email"])
    def test_missing_field_rejected(self, field):
        values = {"name": "Ann", "age": "30", "message": "hi", "email": "a@x.com"}
        values[field] = None

        with pytest.raises(ValidationError, match="All fields are required!") as exc_info:
            validate_submission(images=IMAGES, **values)

        assert exc_info.value.missing == [field]

    @pytest.mark.parametrize("field", ["name", "age", "message", "email"])
    def test_empty_field_rejected(self, field):
        values = {"name": "Ann", "age": "30", "message": "hi", "email": "a@x.com"}
        values[field] = ""

        with pytest.raises(ValidationError):
            validate_submission(images=IMAGES, **values)

    def test_no_images_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_submission("Ann", "30", "hi", "a@x.com", [])

        assert exc_info.value.missing == ["images"]

    def test_all_missing_parts_reported_together(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_submission(None, "30", "", "a@x.com", [])

        assert exc_info.value.missing == ["name", "message", "images"]
        assert exc_info.value.context["missing"] == ["name", "message", "images"]

    def test_fields_are_opaque_strings(self):
        """No numeric age or address syntax checks."""
        record = validate_submission("Ann", "thirty-ish", "hi", "not an email", IMAGES[:1])

        assert record.age == "thirty-ish"
        assert record.email == "not an email"

    def test_record_is_immutable(self):
        record = validate_submission("Ann", "30", "hi", "a@x.com", IMAGES)

        with pytest.raises(PydanticValidationError):
            record.name = "Bob"
