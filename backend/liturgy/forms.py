from __future__ import annotations

from django import forms

BASE_CLS_INPUT = "block w-full rounded-lg border border-gray-300 px-3 py-2 focus:outline-none focus:ring-2 focus:ring-indigo-500 focus:border-indigo-500"

# ===== Admin =====

class AdminLoginForm(forms.Form):
    password = forms.CharField(
        label="Senha",
        strip=False,
        widget=forms.PasswordInput(attrs={"autofocus": True, "class": BASE_CLS_INPUT}),
    )
