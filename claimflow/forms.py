from __future__ import annotations

from decimal import Decimal
from typing import Type

from flask import request
from flask_wtf import FlaskForm
from wtforms import DecimalField, StringField, TextAreaField
from wtforms.fields import DateField
from wtforms.validators import DataRequired, Length, NumberRange, Optional

from claimflow.errors import ValidationError


class ClaimForm(FlaskForm):
    class Meta:
        csrf = False

    # JSON fields that must arrive as strings when present.
    text_fields = ("title", "description", "date")

    title = StringField("Claim title", validators=[DataRequired(), Length(max=150)])
    description = TextAreaField("Description", validators=[Optional(), Length(max=2000)])
    amount = DecimalField(
        "Amount",
        places=2,
        rounding=None,
        validators=[DataRequired(), NumberRange(min=Decimal("0.01"))],
    )
    date = DateField("Date of expense", validators=[DataRequired()])


class DecisionForm(FlaskForm):
    class Meta:
        csrf = False

    text_fields = ("remarks",)

    remarks = TextAreaField("Remarks", validators=[Optional(), Length(max=2000)])


def _check_json_body(form_class: Type[FlaskForm]) -> None:
    """Reject JSON bodies WTForms cannot coerce: non-objects and non-string text fields."""
    if not request.is_json:
        return
    payload = request.get_json(silent=True)
    if payload is None:
        return
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object.")
    wrong = sorted(
        name
        for name in form_class.text_fields
        if name in payload and not isinstance(payload[name], str)
    )
    if wrong:
        raise ValidationError(f"Invalid fields - {', '.join(wrong)}: must be a string")
    amount = payload.get("amount")
    if not hasattr(form_class, "amount") or amount is None:
        return
    if isinstance(amount, bool) or not isinstance(amount, (int, float, str)):
        raise ValidationError("Invalid fields - amount: must be a number")


def validated(form_class: Type[FlaskForm]) -> FlaskForm:
    """Build ``form_class`` from the request and validate it.

    Raises ``ValidationError`` naming the failing fields.
    """
    _check_json_body(form_class)
    form = form_class()
    if not form.validate():
        problems = "; ".join(
            f"{name}: {', '.join(messages)}" for name, messages in sorted(form.errors.items())
        )
        raise ValidationError(f"Invalid fields - {problems}")
    return form
