"""Email and SMS bodies sent to attendees."""

from html import escape

from src.service.ticketing.domain.entity.attendee_entity import Attendee
from src.service.ticketing.domain.entity.event_entity import Event


_BRAND_COLOR = '#6366F1'


def format_event_date(event: Event) -> str:
    start = event.start_date
    return f'{start:%A, %B} {start.day}, {start:%Y at %I:%M %p} {event.timezone}'


def event_link(*, base_url: str, event: Event) -> str:
    return f'{base_url.rstrip("/")}/events/{event.slug}'


def ticket_email_subject(event: Event) -> str:
    return f'Your ticket for {event.title}'


def ticket_email_html(*, attendee: Attendee, event: Event, token: str, qr_code: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Your Event Ticket</title></head>
<body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <div style="text-align: center; margin-bottom: 30px;">
    <h1 style="color: {_BRAND_COLOR};">Your Event Ticket</h1>
  </div>
  <div style="background: #f8f9fa; padding: 20px; border-radius: 8px; margin-bottom: 20px;">
    <h2 style="margin-top: 0;">{escape(event.title)}</h2>
    <p><strong>Attendee:</strong> {escape(attendee.name)}</p>
    <p><strong>Date:</strong> {format_event_date(event)}</p>
    <p><strong>Ticket ID:</strong> {escape(token)}</p>
  </div>
  <div style="text-align: center; margin: 30px 0;">
    <img src="{qr_code}" alt="QR Code" style="border: 1px solid #ddd; padding: 10px; background: white;" />
    <p style="font-size: 12px; color: #666;">Present this QR code for check-in</p>
  </div>
  <div style="border-top: 1px solid #ddd; padding-top: 20px; font-size: 12px; color: #666;">
    <p>Thank you for registering! Please save this email for your records.</p>
  </div>
</body>
</html>"""


def reminder_email_html(*, attendee: Attendee, event: Event, link: str, message: str = '') -> str:
    """Standard reminder, or the organiser's own `message` when given."""
    if message:
        return (
            f'<p>Hi {escape(attendee.name)},</p>'
            f'<p>{escape(message)}</p>'
            f'<p><strong>Event:</strong> {escape(event.title)}</p>'
            f'<p><strong>Date:</strong> {format_event_date(event)}</p>'
            f'<p><a href="{link}">View Event Details</a></p>'
        )
    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Event Reminder</title></head>
<body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <div style="text-align: center; margin-bottom: 30px;">
    <h1 style="color: {_BRAND_COLOR};">Event Reminder</h1>
  </div>
  <p>Hi {escape(attendee.name)},</p>
  <p>This is a reminder that you're registered for:</p>
  <div style="background: #f8f9fa; padding: 20px; border-radius: 8px; margin: 20px 0;">
    <h2 style="margin-top: 0; color: {_BRAND_COLOR};">{escape(event.title)}</h2>
    <p><strong>Date:</strong> {format_event_date(event)}</p>
  </div>
  <div style="text-align: center; margin: 30px 0;">
    <a href="{link}" style="background: {_BRAND_COLOR}; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px; display: inline-block;">
      View Event Details
    </a>
  </div>
  <p>We look forward to seeing you there!</p>
</body>
</html>"""


def reminder_sms_text(*, attendee: Attendee, event: Event, message: str = '') -> str:
    if message:
        return message
    return (
        f'Hi {attendee.name}, reminder: {event.title} is coming up on '
        f"{format_event_date(event)}. Don't forget to attend!"
    )
