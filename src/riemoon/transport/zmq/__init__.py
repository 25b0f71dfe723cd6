"""ZeroMQ backed transports."""
