from django import forms
from django.contrib.auth import get_user_model

User = get_user_model()


class RegistrationForm(forms.Form):
    full_name = forms.CharField(max_length=150)
    phone = forms.CharField(max_length=30)
    email = forms.EmailField(error_messages={"invalid": "Invalid email format"})
    password = forms.CharField(min_length=6, error_messages={"min_length": "Password must be at least 6 characters"})

    def clean_email(self):
        email = self.cleaned_data["email"].strip().lower()
        if User.objects.filter(email__iexact=email).exists():
            raise forms.ValidationError("Email already registered")
        return email


class LoginForm(forms.Form):
    email = forms.EmailField(error_messages={"invalid": "Invalid email format"})
    password = forms.CharField()


class ProfileUpdateForm(forms.Form):
    full_name = forms.CharField(max_length=150)
    email = forms.EmailField(error_messages={"invalid": "Invalid email format"})
    phone = forms.CharField(max_length=30, required=False)
    new_password = forms.CharField(min_length=6, required=False)

    def __init__(self, *args, user=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user = user

    def clean_email(self):
        email = self.cleaned_data["email"].strip().lower()
        others = User.objects.filter(email__iexact=email)
        if self.user is not None:
            others = others.exclude(pk=self.user.pk)
        if others.exists():
            raise forms.ValidationError("Email already exists")
        return email


def first_error(form) -> str:
    """Flatten a bound form's errors to the first message (fields in declaration order)."""
    for name in form.fields:
        if name in form.errors:
            message = form.errors[name][0]
            if message == "This field is required.":
                return "All fields are required"
            return message
    non_field = form.non_field_errors()
    return non_field[0] if non_field else "Invalid input"
