from django.dispatch import Signal

# Reconciliation signals, sent after the sale transaction commits
sale_created = Signal()  # sender=Sale, sale=instance, previous_status=None
sale_updated = Signal()  # sender=Sale, sale=instance, previous_status=str

# sender=Notification, notification=instance, result=DispatchResult
notification_dispatched = Signal()
