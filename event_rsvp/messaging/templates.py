from dataclasses import dataclass

from event_rsvp.invitations.dtos import Event, RSVPResponse


@dataclass
class MessageTemplates:
    INVITATION = """🎉 *Event Invitation* 🎉

*{title}*
{description_block}
📅 Date: {date}
🕐 Time: {time}
{location_line}
Please reply with:
✅ "Accept" or "Yes" to confirm your attendance
❌ "Decline" or "No" if you cannot attend

We look forward to seeing you there!"""

    ACCEPTED_CONFIRMATION = """✅ Thank you for confirming!

We're excited to see you at:
*{title}*
📅 {date} at {time}
{location_line}
See you there! 🎉"""

    DECLINED_CONFIRMATION = """Thank you for letting us know.

We're sorry you can't make it to:
*{title}*

Hope to see you at future events! 😊"""

    @classmethod
    def _fields(cls, event: Event) -> dict[str, str]:
        return {
            "title": event.title,
            "description_block": f"\n📝 {event.description}\n" if event.description else "",
            "date": event.date.isoformat(),
            "time": event.time.strftime("%H:%M"),
            "location_line": f"📍 Location: {event.location}\n" if event.location else "",
        }

    @classmethod
    def invitation(cls, event: Event) -> str:
        return cls.INVITATION.format(**cls._fields(event))

    @classmethod
    def confirmation(cls, response: RSVPResponse, event: Event) -> str:
        fields = cls._fields(event)
        if response == RSVPResponse.ACCEPTED:
            fields["location_line"] = f"📍 {event.location}\n" if event.location else ""
            return cls.ACCEPTED_CONFIRMATION.format(**fields)
        return cls.DECLINED_CONFIRMATION.format(**fields)
