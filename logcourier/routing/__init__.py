"""logcourier event routing — delivers composed events to every enabled sink.

Console and file sinks are written synchronously by the ``SinkRouter``;
the Logstash network sink is fed through the ``DeliveryScheduler``, which
batches events and flushes them periodically or on demand.
"""
