from prometheus_client import Counter, Histogram


class TicketingMetrics:
    """
    Ticket lifecycle metrics

    Counts the outcomes an operator watches: sold-out pressure, webhook
    redelivery volume, gate rejections and notification health.
    """

    def __init__(self) -> None:
        # ========== Registration ==========
        self.registrations = Counter(
            'ticketing_registrations_total',
            'Registration attempts by outcome',
            ['kind', 'result'],  # kind: free/paid, result: issued/pending/sold_out/gateway_error
        )

        # ========== Payment Webhooks ==========
        self.webhook_events = Counter(
            'ticketing_webhook_events_total',
            'Payment webhook deliveries by event type and outcome',
            ['event_type', 'outcome'],
        )

        # ========== Check-in ==========
        self.check_ins = Counter(
            'ticketing_check_ins_total',
            'Check-in attempts by result',
            ['result'],  # result: admitted or the rejection code
        )

        self.check_in_duration = Histogram(
            'ticketing_check_in_duration_seconds',
            'Time spent validating and admitting a ticket',
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
        )

        # ========== Notifications ==========
        self.notifications = Counter(
            'ticketing_notifications_total',
            'Notification deliveries by kind and result',
            ['kind', 'result'],  # result: sent/retry/gave_up
        )

    def record_registration(self, *, kind: str, result: str) -> None:
        self.registrations.labels(kind=kind, result=result).inc()

    def record_webhook(self, *, event_type: str, outcome: str) -> None:
        self.webhook_events.labels(event_type=event_type, outcome=outcome).inc()

    def record_check_in(self, *, result: str) -> None:
        self.check_ins.labels(result=result).inc()

    def record_notification(self, *, kind: str, result: str) -> None:
        self.notifications.labels(kind=kind, result=result).inc()


# Global metrics instance
metrics = TicketingMetrics()
