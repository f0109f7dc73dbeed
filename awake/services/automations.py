"""Keyword-triggered automation detection."""

from awake.models.chat import AutomationAction, AutomationType

# Checked in this order; output order follows it regardless of keyword position
AUTOMATION_TRIGGERS: tuple[tuple[str, AutomationType, str, str], ...] = (
    ("email", AutomationType.EMAIL, "Action simulated: Email sent!", "📧"),
    ("task", AutomationType.TASK, "Action simulated: Jira task created!", "✅"),
    ("slack", AutomationType.SLACK, "Action simulated: Slack message posted!", "💬"),
)


def detect_automations(message: str) -> list[AutomationAction]:
    """
    Detect simulated automations requested in a message.

    Each keyword is matched case-insensitively and independently, so a
    message can trigger several automations. Nothing is actually sent.

    Args:
        message: Original user message

    Returns:
        Automation actions in email, task, slack order
    """
    lowered = message.lower()
    return [
        AutomationAction(type=action_type, message=description, icon=icon)
        for keyword, action_type, description, icon in AUTOMATION_TRIGGERS
        if keyword in lowered
    ]
