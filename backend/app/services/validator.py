"""
FormDrop Backend: Submission Validator
========================================

Pure, synchronous check of an incoming form. All four text fields are
treated as opaque strings: the only rule is "present and non-empty". No
format, length or numeric checks are made.
"""

import logging
from typing import Optional, Sequence

from app.exceptions import ValidationError
from app.schemas.submission import SubmissionRecord

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "age", "message", "email")


def validate_submission(
    name: Optional[str],
    age: Optional[str],
    message: Optional[str],
    email: Optional[str],
    images: Sequence[str],
) -> SubmissionRecord:
    """
    Build a SubmissionRecord or raise ValidationError.

    Every field and the image list are checked together, so the error
    context names all missing parts at once.

    Raises:
        ValidationError("All fields are required!") with `missing` listing
        the absent field names ("images" when no attachment was received).
    """
    values = {"name": name, "age": age, "message": message, "email": email}
    missing = [field for field in REQUIRED_FIELDS if not values[field]]
    if not images:
        missing.append("images")

    if missing:
        logger.info("Submission rejected, missing: %s", ", ".join(missing))
        raise ValidationError(message="All fields are required!", missing=missing)

    return SubmissionRecord(
        name=name,
        age=age,
        message=message,
        email=email,
        images=list(images),
    )
