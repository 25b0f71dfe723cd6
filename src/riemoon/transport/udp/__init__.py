"""Plain socket datagram transports."""
