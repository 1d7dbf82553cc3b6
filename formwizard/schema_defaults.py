"""Default values shared between the form store, the theme helpers and the runner."""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict

DEFAULT_PAGE_TITLE = "Registration"
DEFAULT_NEXT_LABEL = "Next"
DEFAULT_BACK_LABEL = "Back"
DEFAULT_SUBMIT_LABEL = "Submit"
DEFAULT_SUBMIT_SUCCESS_MESSAGE = "Thanks! Your registration has been received."
DEFAULT_DEBUG_LABEL = "Debug: current answers"
UNSELECTED_LABEL = "— Select an option —"

DEFAULT_THEME: Dict[str, Any] = {
    "primaryColor": "#3B82F6",
    "backgroundColor": "#FFFFFF",
    "textColor": "#1F2937",
    "borderRadius": "0.5rem",
    "spacing": "1.5rem",
    "questionSpacing": "2rem",
    "buttonStyle": "solid",
    "layout": "default",
    "alignment": "left",
    "customCSS": "",
}

DEFAULT_FORM: Dict[str, Any] = {
    "id": "default-user-registration",
    "title": "User Registration",
    "description": "Collect essential information from new users",
    "status": "published",
    "groups": [],
    "questions": [
        {
            "id": "fullname",
            "type": "text",
            "label": "Full Name",
            "required": True,
            "placeholder": "Enter your full name",
            "validation": {
                "pattern": "^[a-zA-Z\\s]{2,}$",
                "message": "Please enter your full name (minimum 2 characters)",
            },
        },
        {
            "id": "email",
            "type": "email",
            "label": "Email Address",
            "required": True,
            "placeholder": "you@example.com",
            "validation": {
                "pattern": "[a-z0-9._%+-]+@[a-z0-9.-]+\\.[a-z]{2,}$",
                "message": "Please enter a valid email address",
            },
        },
        {
            "id": "phone",
            "type": "phone",
            "label": "Phone Number",
            "required": False,
            "placeholder": "+1 (555) 000-0000",
            "validation": {
                "pattern": "^\\+?[1-9]\\d{1,14}$",
                "message": "Please enter a valid phone number",
            },
        },
        {
            "id": "role",
            "type": "select",
            "label": "Role",
            "required": True,
            "placeholder": "Select your role",
            "options": [
                {"id": "developer", "label": "Developer", "value": "developer"},
                {"id": "designer", "label": "Designer", "value": "designer"},
                {"id": "manager", "label": "Project Manager", "value": "manager"},
                {"id": "other", "label": "Other", "value": "other"},
            ],
        },
        {
            "id": "skills",
            "type": "multiselect",
            "label": "Skills",
            "required": True,
            "options": [
                {"id": "js", "label": "JavaScript", "value": "javascript"},
                {"id": "react", "label": "React", "value": "react"},
                {"id": "node", "label": "Node.js", "value": "nodejs"},
                {"id": "ts", "label": "TypeScript", "value": "typescript"},
                {"id": "ui", "label": "UI Design", "value": "ui"},
                {"id": "ux", "label": "UX Design", "value": "ux"},
            ],
            "validation": {"message": "Please select at least one skill"},
        },
        {
            "id": "start_date",
            "type": "date",
            "label": "Available Start Date",
            "required": True,
            "validation": {"message": "Please select your available start date"},
        },
    ],
    "theme": DEFAULT_THEME,
}


def default_theme() -> Dict[str, Any]:
    """Return a mutable copy of the default theme."""

    return dict(DEFAULT_THEME)


def default_form() -> Dict[str, Any]:
    """Return a mutable copy of the seeded registration form payload."""

    return deepcopy(DEFAULT_FORM)
