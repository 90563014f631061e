"""Bilingual notification template catalog.

Each entry holds:
- business_template: the approved business-message template name
- param_order: positional parameter order of that approved template
- title/body/subject in Arabic and English with ``{placeholder}`` tokens
"""

import re
from typing import Dict, Mapping, Optional

from infrastructure.notifications.models import NotificationTemplate, NotificationType

_PLACEHOLDER = re.compile(r"\{(\w+)\}")

TEMPLATES: Dict[NotificationType, NotificationTemplate] = {
    NotificationType.GATHERING_REMINDER: NotificationTemplate(
        type=NotificationType.GATHERING_REMINDER,
        business_template="gathering_reminder",
        param_order=("groupName", "time", "location"),
        title_en="Gathering Tomorrow",
        title_ar="اجتماع غداً",
        body_en="Reminder: {groupName} meets tomorrow at {time}. Location: {location}",
        body_ar="تذكير: مجموعة {groupName} تجتمع غداً الساعة {time}. المكان: {location}",
        subject_en="Reminder: {groupName} gathering tomorrow",
        subject_ar="تذكير: اجتماع {groupName} غداً",
    ),
    NotificationType.VISITOR_ASSIGNED: NotificationTemplate(
        type=NotificationType.VISITOR_ASSIGNED,
        business_template="visitor_assigned",
        param_order=("visitorName",),
        title_en="New Visitor Assigned",
        title_ar="زائر جديد مُسنَد إليك",
        body_en=(
            "New visitor {visitorName} has been assigned to you. "
            "Please reach out within 48 hours."
        ),
        body_ar="تم إسناد الزائر {visitorName} إليك. يرجى التواصل خلال 48 ساعة.",
        subject_en="New visitor assigned: {visitorName}",
        subject_ar="زائر جديد مُسنَد إليك: {visitorName}",
    ),
    NotificationType.VISITOR_WELCOME: NotificationTemplate(
        type=NotificationType.VISITOR_WELCOME,
        business_template="visitor_welcome",
        param_order=("organizationName",),
        title_en="Welcome!",
        title_ar="أهلاً وسهلاً!",
        body_en=(
            "Welcome to {organizationName}! We are glad you visited us. "
            "One of our team members will contact you soon."
        ),
        body_ar=(
            "أهلاً بك في {organizationName}! يسعدنا زيارتك. "
            "سيتواصل معك أحد أعضاء فريقنا قريباً."
        ),
        subject_en="Welcome to {organizationName}!",
        subject_ar="أهلاً بك في {organizationName}!",
    ),
    NotificationType.AT_RISK_ALERT: NotificationTemplate(
        type=NotificationType.AT_RISK_ALERT,
        business_template="at_risk_alert",
        param_order=("memberName", "groupName", "weeks"),
        title_en="Member Needs Follow-up",
        title_ar="عضو يحتاج متابعة",
        body_en=(
            "{memberName} has been absent from {groupName} for {weeks} "
            "consecutive weeks. Consider reaching out."
        ),
        body_ar="{memberName} غاب عن مجموعة {groupName} لمدة {weeks} أسابيع متتالية. يرجى التواصل.",
        subject_en="{memberName} needs follow-up",
        subject_ar="{memberName} يحتاج متابعة",
    ),
    NotificationType.VISITOR_SLA_WARNING: NotificationTemplate(
        type=NotificationType.VISITOR_SLA_WARNING,
        business_template="visitor_sla_warning",
        param_order=("visitorName",),
        title_en="Visitor SLA Breach",
        title_ar="تأخر التواصل مع زائر",
        body_en=(
            "Visitor {visitorName} has not been contacted and the SLA window "
            "has passed. Please take action."
        ),
        body_ar="الزائر {visitorName} لم يتم التواصل معه وقد انتهت المهلة المحددة. يرجى اتخاذ إجراء.",
        subject_en="Overdue: Visitor {visitorName} not contacted",
        subject_ar="تأخر: لم يتم التواصل مع الزائر {visitorName}",
    ),
    NotificationType.EVENT_REMINDER: NotificationTemplate(
        type=NotificationType.EVENT_REMINDER,
        business_template="event_reminder",
        param_order=("eventName", "time", "location"),
        title_en="Event Tomorrow",
        title_ar="فعالية غداً",
        body_en="Reminder: {eventName} is happening tomorrow at {time}. Location: {location}",
        body_ar="تذكير: {eventName} غداً الساعة {time}. المكان: {location}",
        subject_en="Reminder: {eventName} tomorrow",
        subject_ar="تذكير: {eventName} غداً",
    ),
    # Administrator broadcasts carry their own title and body.
    NotificationType.GENERAL: NotificationTemplate(
        type=NotificationType.GENERAL,
        business_template="general_message",
        param_order=("title", "body"),
        title_en="{title}",
        title_ar="{title}",
        body_en="{body}",
        body_ar="{body}",
        subject_en="{title}",
        subject_ar="{title}",
    ),
}


def lookup(notification_type: NotificationType) -> Optional[NotificationTemplate]:
    """Return the catalog entry for ``notification_type``, or None."""
    return TEMPLATES.get(notification_type)


def interpolate(text: str, params: Mapping[str, str]) -> str:
    """Replace ``{key}`` tokens with ``params[key]``.

    Unknown keys are left in place as the literal ``{key}``.

    Example:
        interpolate("Hello {name}", {"name": "Sara"})  # "Hello Sara"
        interpolate("Hello {missing}", {})              # "Hello {missing}"
    """

    def _replace(match: "re.Match[str]") -> str:
        key = match.group(1)
        if key in params and params[key] is not None:
            return str(params[key])
        return match.group(0)

    return _PLACEHOLDER.sub(_replace, text)
