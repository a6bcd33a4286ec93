from __future__ import annotations

from django import forms


class LoginForm(forms.Form):
    email = forms.EmailField(label="Email", max_length=254)
    password = forms.CharField(label="Password", strip=False, widget=forms.PasswordInput)

    def clean_email(self):
        return (self.cleaned_data.get("email") or "").strip().lower()


class ForgotPasswordForm(forms.Form):
    email = forms.EmailField(
        label="Email",
        max_length=254,
        widget=forms.EmailInput(attrs={"placeholder": "your.email@example.com"}),
    )

    def clean_email(self):
        return (self.cleaned_data.get("email") or "").strip().lower()
