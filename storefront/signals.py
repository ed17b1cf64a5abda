from django.dispatch import Signal

# Sent after every full refresh of a content store.
# Arguments: store, report (RefreshReport)
store_refreshed = Signal()
