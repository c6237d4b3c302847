"""
Request field validators
"""

from typing import Annotated

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator


def check_email(value: str) -> str:
    """
    Syntax-only email check.

    Addresses on the reserved `.test` domain are accepted and no DNS lookup
    is made; the normalized address is returned.
    """
    try:
        checked = validate_email(value, check_deliverability=False, test_environment=True)
    except EmailNotValidError as e:
        raise ValueError(str(e)) from e
    return checked.normalized


Email = Annotated[str, AfterValidator(check_email)]
