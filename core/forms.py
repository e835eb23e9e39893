"""Forms validating chart selections from query strings and request bodies."""

from __future__ import annotations

from django import forms

from analysis.cas import InvalidCasNumber, normalize_cas
from core.charting.schema import COLOR_MODE_LABELS
from core.services import MAX_COMPARISON_SUBSTANCES, MIN_COMPARISON_SUBSTANCES


class CasNumberField(forms.CharField):
    """A CharField that normalizes and validates CAS registry numbers."""

    def clean(self, value: object) -> str:
        """Return the hyphenated CAS number."""

        cleaned = super().clean(value)
        if not cleaned:
            return cleaned
        try:
            return normalize_cas(cleaned)
        except InvalidCasNumber as exc:
            raise forms.ValidationError(str(exc), code="invalid_cas") from exc


class SubstanceForm(forms.Form):
    """Validate the substance selection and EC10eq color mode for the dashboard."""

    cas = CasNumberField(required=False, max_length=32, label="CAS number")
    color_by = forms.ChoiceField(
        required=False,
        choices=tuple(COLOR_MODE_LABELS.items()),
        label="Color by",
    )

    def clean_color_by(self) -> str:
        """Default to trophic-group coloring."""

        return self.cleaned_data.get("color_by") or "trophic_group"


class CasListField(forms.MultipleChoiceField):
    """Free-form multi-value field; values are checked as CAS numbers by the form."""

    def valid_value(self, value: str) -> bool:
        """Accept any value; CAS validation happens in `ComparisonForm.clean_cas`."""

        return True


class ComparisonForm(forms.Form):
    """Validate a multi-substance SSD comparison selection."""

    cas = CasListField(required=True, label="Substances")

    def clean_cas(self) -> list[str]:
        """Normalize CAS numbers and enforce the 2-3 distinct substance rule."""

        raw = self.cleaned_data.get("cas") or []
        normalized: list[str] = []
        for value in raw:
            try:
                normalized.append(normalize_cas(value))
            except InvalidCasNumber as exc:
                raise forms.ValidationError(str(exc), code="invalid_cas") from exc
        if len(set(normalized)) != len(normalized):
            raise forms.ValidationError("Each substance can only be selected once.", code="duplicate")
        if not MIN_COMPARISON_SUBSTANCES <= len(normalized) <= MAX_COMPARISON_SUBSTANCES:
            raise forms.ValidationError(
                f"Select {MIN_COMPARISON_SUBSTANCES} to {MAX_COMPARISON_SUBSTANCES} substances to compare.",
                code="selection_size",
            )
        return normalized