from django import forms

from .models import Job

# Checked in this order; the first empty one is reported.
JOB_REQUIRED_FIELDS = ("title", "company", "location", "description", "category_id")


class JobForm(forms.ModelForm):
    class Meta:
        model = Job
        fields = [
            "title",
            "company",
            "location",
            "description",
            "requirements",
            "salary_min",
            "salary_max",
            "job_type",
            "category",
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["category"].required = True
        self.fields["requirements"].required = False
        self.fields["job_type"].required = False

    def clean_requirements(self):
        return self.cleaned_data.get("requirements") or ""

    def clean_job_type(self):
        return (self.cleaned_data.get("job_type") or "").strip() or "Full-time"

    def clean(self):
        cleaned = super().clean()
        lo, hi = cleaned.get("salary_min"), cleaned.get("salary_max")
        if lo is not None and hi is not None and lo > hi:
            raise forms.ValidationError("salary_min cannot exceed salary_max")
        return cleaned


def job_form_data(post) -> dict:
    """Map the API's form fields onto JobForm's (category_id -> category)."""
    data = {key: post.get(key) for key in post.keys()}
    data["category"] = post.get("category_id") or post.get("category")
    return data


def missing_job_field(post) -> str | None:
    for name in JOB_REQUIRED_FIELDS:
        if not (post.get(name) or "").strip():
            return name
    return None


def first_error(form) -> str:
    for name in form.fields:
        if name in form.errors:
            label = "category_id" if name == "category" else name
            return f"Invalid value for '{label}': {form.errors[name][0]}"
    non_field = form.non_field_errors()
    return non_field[0] if non_field else "Invalid input"
