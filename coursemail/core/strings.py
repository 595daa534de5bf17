"""Display strings keyed by identifier.

Everything user-facing that the services produce goes through ``get_string``
so a translation layer can replace the table without touching callers.
"""

STRINGS: dict[str, str] = {
    # Compose form labels
    "from": "From",
    "included_ids_label": "Included recipients",
    "excluded_ids_label": "Excluded recipients",
    "no_included_recipients": "No included recipients",
    "no_excluded_recipients": "No excluded recipients",
    "subject": "Subject",
    "body": "Body",
    "additional_emails": "Additional emails",
    "attachments": "Attachments",
    "signature": "Signature",
    "none": "None",
    "select_message_type": "Message type",
    "message_type_message": "Course message",
    "message_type_email": "Email",
    "send_at": "Send at",
    "receipt": "Receive a copy",
    "mentor_copy": "Copy mentors of recipients",
    "yes": "Yes",
    "no": "No",
    "default_suffix": " (default)",
    "no_signatures_create": "You have no signatures. {link}",
    "create_new": "Create new",
    "select_allowed_user_fields": "Insertable fields",
    # Validation
    "no_included_recipients_validation": "You must include at least one recipient.",
    "invalid_additional_emails_validation": "One or more additional emails are invalid.",
    "signature_title_required": "A signature title is required.",
    "signature_signature_required": "Signature content is required.",
    "signature_title_must_be_unique": "You already have a signature with this title.",
}


def get_string(key: str, **params: str) -> str:
    """Resolve a display string, interpolating ``{name}`` params.

    Unknown keys resolve to ``[[key]]`` so missing strings are visible.
    """
    value = STRINGS.get(key)
    if value is None:
        return f"[[{key}]]"
    if params:
        return value.format(**params)
    return value
