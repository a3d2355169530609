"""
School Directory — Submission Form Rules
==========================================

What:  Tests for the messages the "Add School" page shows per field.
"""

import base64

import pytest

from school_directory.services.upload_service import ImageUpload
from school_directory.web.forms import image_preview, validate_form


def _errors(school_fields, **changes):
    values = {**school_fields, **changes}
    form, errors = validate_form(values)
    assert form is None
    return errors


class TestValidateForm:

    def test_valid_form(self, school_fields):
        form, errors = validate_form(school_fields)
        assert errors == {}
        assert form.students == 1200
        assert form.as_form_data()["students"] == "1200"

    @pytest.mark.parametrize(
        "field, value, message",
        [
            ("name", "A", "Name is required"),
            ("address", "1 Rd", "Address is required"),
            ("city", "", "City is required"),
            ("state", None, "State is required"),
            ("contact", "123456", "Contact must be at least 7 digits"),
            ("contact", "1234567890123456", "Contact too long"),
            ("contact", "98765-4321", "Contact must contain only digits"),
            ("email_id", "not-an-email", "Invalid email"),
            ("email_id", "Green Valley <contact@greenvalley.edu>", "Invalid email"),
            ("students", "", "Number of students is required"),
            ("students", "ten", "Must be a valid number"),
            ("students", "0", "Must be greater than 0"),
        ],
    )
    def test_field_messages(self, school_fields, field, value, message):
        assert _errors(school_fields, **{field: value}) == {field: message}

    def test_all_errors_reported_together(self):
        _, errors = validate_form({})
        assert set(errors) == {"name", "address", "city", "state", "contact", "email_id", "students"}


class TestImagePreview:

    def test_preview_is_data_url(self, sample_image_bytes):
        preview = image_preview(ImageUpload("campus.png", "image/png", sample_image_bytes))
        assert preview == "data:image/png;base64," + base64.b64encode(sample_image_bytes).decode()

    def test_no_preview_without_image(self):
        assert image_preview(None) is None
        assert image_preview(ImageUpload("", "image/png", b"")) is None

    def test_no_preview_for_non_images(self, sample_image_bytes):
        assert image_preview(ImageUpload("brochure.pdf", "application/pdf", sample_image_bytes)) is None
