from .hub import hub, NotificationHub, Subscription, format_event

__all__ = ["hub", "NotificationHub", "Subscription", "format_event"]
